"""
Request throttle tests
"""

import pytest

from signal_gateway.services.throttle import RequestThrottle, ThrottleDecision


class TestRequestThrottle:
    """Test the global cooldown gate"""

    def test_first_request_admitted(self):
        """The very first request is admitted even at t=0"""
        throttle = RequestThrottle(cooldown_ms=15000)
        assert throttle.admit(0) == ThrottleDecision(admitted=True)
        assert throttle.last_accepted == 0

    def test_scenario_admit_reject_admit(self):
        """t=0 admitted, t=5000 rejected with 10s, t=15001 admitted"""
        throttle = RequestThrottle(cooldown_ms=15000)

        assert throttle.admit(0).admitted

        rejected = throttle.admit(5000)
        assert not rejected.admitted
        assert rejected.seconds_remaining == 10

        assert throttle.admit(15001).admitted
        assert throttle.last_accepted == 15001

    @pytest.mark.parametrize("elapsed,expected", [
        (1, 15),
        (999, 15),
        (1000, 14),
        (5000, 10),
        (14001, 1),
        (14999, 1),
    ])
    def test_seconds_remaining_rounds_up(self, elapsed, expected):
        """Remaining time is ceil((cooldown - elapsed) / 1000)"""
        throttle = RequestThrottle(cooldown_ms=15000)
        throttle.admit(100000)
        decision = throttle.admit(100000 + elapsed)
        assert not decision.admitted
        assert decision.seconds_remaining == expected

    def test_exact_cooldown_boundary_admitted(self):
        """Elapsed equal to the cooldown is admitted and resets the window"""
        throttle = RequestThrottle(cooldown_ms=15000)
        throttle.admit(1000)
        assert throttle.admit(16000).admitted
        assert not throttle.admit(20000).admitted

    def test_rejection_does_not_move_window(self):
        """Rejected requests leave the last admission untouched"""
        throttle = RequestThrottle(cooldown_ms=15000)
        throttle.admit(0)
        throttle.admit(5000)
        throttle.admit(14000)
        assert throttle.last_accepted == 0
        assert throttle.admit(15000).admitted

    def test_uses_clock_when_no_time_given(self, fake_clock):
        """The injected clock supplies arrival times"""
        throttle = RequestThrottle(cooldown_ms=15000, clock=fake_clock)
        fake_clock.now = 50000
        assert throttle.admit().admitted
        fake_clock.now = 52500
        assert throttle.admit().seconds_remaining == 13

    def test_zero_cooldown_admits_everything(self):
        throttle = RequestThrottle(cooldown_ms=0)
        assert all(throttle.admit(t).admitted for t in (0, 0, 1, 1))

    def test_negative_cooldown_rejected(self):
        with pytest.raises(ValueError):
            RequestThrottle(cooldown_ms=-1)

    def test_reset(self):
        throttle = RequestThrottle(cooldown_ms=15000)
        throttle.admit(0)
        throttle.reset()
        assert throttle.admit(1).admitted
