import pytest

from embd.servo import PWM, Servo


class RecordingPWM(PWM):
    def __init__(self):
        self.widths = []

    def set_microseconds(self, us):
        self.widths.append(us)


def test_angle_zero_gives_minimum_pulse():
    pwm = RecordingPWM()
    Servo(pwm).set_angle(0)
    assert pwm.widths == [544]


def test_angle_180_gives_maximum_pulse():
    pwm = RecordingPWM()
    Servo(pwm).set_angle(180)
    assert pwm.widths == [2400]


def test_custom_limits():
    pwm = RecordingPWM()
    Servo(pwm, minus=1000, maxus=2000).set_angle(90)
    assert pwm.widths == [1500]


def test_pulse_increases_with_angle():
    pwm = RecordingPWM()
    servo = Servo(pwm)
    for angle in (0, 45, 90, 135, 180):
        servo.set_angle(angle)
    assert pwm.widths == sorted(pwm.widths)
    assert len(set(pwm.widths)) == 5


def test_pwm_errors_propagate():
    class BrokenPWM(PWM):
        def set_microseconds(self, us):
            raise OSError("no device")

    with pytest.raises(OSError):
        Servo(BrokenPWM()).set_angle(90)