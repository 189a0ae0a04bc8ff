from cue_importer.timecode import ticks_to_duration

TICKS_PER_SECOND = 254016000000


def test_zero_ticks():
    """Zero ticks format as an empty duration without rounding."""
    duration = ticks_to_duration(0, fps=23.976, ticks_per_second=TICKS_PER_SECOND)

    assert duration.formatted == "0:00:00"
    assert duration.was_rounded is False
    assert duration.seconds == 0
    assert duration.frames == 0


def test_negative_ticks_are_treated_as_zero():
    assert ticks_to_duration(-5).formatted == "0:00:00"


def test_whole_seconds():
    duration = ticks_to_duration(5 * TICKS_PER_SECOND)

    assert duration.formatted == "0:05:00"
    assert duration.was_rounded is False
    assert duration.seconds == 5.0


def test_remainder_below_cut_point_keeps_frames():
    """A quarter second at 23.976 fps is 6 frames and is not rounded."""
    duration = ticks_to_duration(int(10.25 * TICKS_PER_SECOND))

    assert duration.formatted == "0:10:06"
    assert duration.was_rounded is False


def test_remainder_at_cut_point_rounds_up():
    """Twelve or more leftover frames carry into the next second."""
    duration = ticks_to_duration(int(10.6 * TICKS_PER_SECOND))

    assert duration.formatted == "0:11:00"
    assert duration.was_rounded is True
    assert duration.seconds == 11.0


def test_round_up_carries_into_minutes():
    duration = ticks_to_duration(int(59.9 * TICKS_PER_SECOND))

    assert duration.formatted == "1:00:00"
    assert duration.was_rounded is True


def test_long_duration_formats_minutes():
    duration = ticks_to_duration(125 * TICKS_PER_SECOND)

    assert duration.formatted == "2:05:00"


def test_cut_point_is_independent_of_frame_rate():
    """At 60 fps, 0.25s is 15 frames, which is past the fixed cut point."""
    duration = ticks_to_duration(int(3.25 * TICKS_PER_SECOND), fps=60)

    assert duration.formatted == "0:04:00"
    assert duration.was_rounded is True


def test_half_frame_rounds_up():
    """Exactly half a frame counts as a frame, for both the remainder and the total."""
    duration = ticks_to_duration(int(10.25 * TICKS_PER_SECOND), fps=2, ticks_per_second=TICKS_PER_SECOND)

    assert duration.formatted == "0:10:01"
    assert duration.frames == 21
    assert duration.was_rounded is False
