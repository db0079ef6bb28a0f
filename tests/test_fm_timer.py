from dvmodem.fm_timer import FMTimer


def test_new_timer_is_idle():
    timer = FMTimer()
    assert timer.is_running() is False
    assert timer.has_expired() is False
    assert timer.get_timeout() == 0


def test_timeout_reported_in_milliseconds():
    timer = FMTimer()
    timer.set_timeout(2, 500)
    assert timer.get_timeout() == 2500


def test_start_without_timeout_does_not_run():
    timer = FMTimer()
    timer.start()
    assert timer.is_running() is False


def test_expires_after_timeout_samples():
    timer = FMTimer()
    timer.set_timeout(0, 1)
    timer.start()
    assert timer.is_running() is True
    timer.clock(23)
    assert timer.has_expired() is False
    timer.clock(1)
    assert timer.has_expired() is True


def test_clock_does_not_start_stopped_timer():
    timer = FMTimer()
    timer.set_timeout(1, 0)
    timer.clock(100000)
    assert timer.is_running() is False
    assert timer.has_expired() is False


def test_stop_clears_expiry_and_restart_resets():
    timer = FMTimer()
    timer.set_timeout(0, 1)
    timer.start()
    timer.clock(200)
    assert timer.has_expired() is True
    timer.stop()
    assert timer.has_expired() is False
    timer.start()
    assert timer.has_expired() is False
    assert timer.is_running() is True