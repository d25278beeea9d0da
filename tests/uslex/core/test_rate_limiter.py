from uslex.core import rate_limiter
from uslex.core.rate_limiter import PolitenessLimiter


class TestPolitenessLimiter:
    def test_retry_after_sets_delay(self):
        limiter = PolitenessLimiter(min_delay=2.0, max_delay=300.0)
        limiter.record_rate_limit(30)
        assert limiter.get_current_delay() == 30.0

    def test_retry_after_is_capped(self):
        limiter = PolitenessLimiter(min_delay=2.0, max_delay=300.0)
        limiter.record_rate_limit(3600)
        assert limiter.get_current_delay() == 300.0

    def test_backs_off_without_retry_after(self):
        limiter = PolitenessLimiter(min_delay=2.0)
        limiter.record_rate_limit()
        assert limiter.get_current_delay() == 4.0

    def test_success_decays_to_floor(self):
        limiter = PolitenessLimiter(min_delay=2.0)
        limiter.record_rate_limit()
        limiter.record_success()
        assert limiter.get_current_delay() == 4.0 * 0.9

        for _ in range(50):
            limiter.record_success()
        assert limiter.get_current_delay() == 2.0

    def test_wait_spaces_requests(self, monkeypatch):
        sleeps = []
        monkeypatch.setattr(rate_limiter.time, "sleep", sleeps.append)
        limiter = PolitenessLimiter(min_delay=5.0)

        assert limiter.wait() == 0.0
        slept = limiter.wait()

        assert 0 < slept <= 5.0
        assert sleeps == [slept]
