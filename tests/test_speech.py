import threading

from gym_coach.client.speech import Speaker


class FakeEngine:
    def __init__(self, gate=None, fail=False):
        self.gate = gate
        self.fail = fail
        self.props = {}
        self.spoken = []
        self.running = threading.Event()
        self.stops = 0

    def setProperty(self, name, value):
        self.props[name] = value

    def say(self, text):
        if self.fail:
            raise RuntimeError("no audio device")
        self.spoken.append(text)

    def runAndWait(self):
        self.running.set()
        if self.gate is not None:
            self.gate.wait(5)

    def stop(self):
        self.stops += 1
        if self.gate is not None:
            self.gate.set()


def test_request_while_speaking_is_dropped():
    gate = threading.Event()
    engines = []

    def factory():
        engines.append(FakeEngine(gate))
        return engines[-1]

    speaker = Speaker(rate=150, engine_factory=factory)
    assert speaker.say("Great work! That's 3!")
    assert speaker.is_speaking
    assert not speaker.say("Keep your core tight throughout the movement!")

    gate.set()
    speaker.wait(5)
    assert not speaker.is_speaking
    assert [e.spoken for e in engines] == [["Great work! That's 3!"]]
    assert engines[0].props["rate"] == 150

    assert speaker.say("Next one")
    speaker.wait(5)
    assert engines[1].spoken == ["Next one"]


def test_empty_text_is_ignored():
    speaker = Speaker(engine_factory=FakeEngine)
    assert not speaker.say("")
    assert not speaker.is_speaking


def test_engine_error_frees_the_voice():
    speaker = Speaker(engine_factory=lambda: FakeEngine(fail=True))
    assert speaker.say("hello")
    speaker.wait(5)
    assert not speaker.is_speaking
    assert speaker.say("again")
    speaker.wait(5)


def test_stop_cuts_current_utterance():
    gate = threading.Event()
    engine = FakeEngine(gate)
    speaker = Speaker(engine_factory=lambda: engine)

    assert speaker.say("Keep your chest up and your back straight!")
    assert engine.running.wait(5)
    speaker.stop()
    speaker.wait(1)

    assert not speaker.is_speaking
    assert engine.stops >= 1


def test_stop_when_silent_is_harmless():
    speaker = Speaker(engine_factory=FakeEngine)
    speaker.stop()
    assert not speaker.is_speaking
