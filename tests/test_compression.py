import pytest

from simulations.compression import (
    compression_ratio,
    describe_ratio,
    generate,
    rle_decode,
    rle_encode,
    rle_groups,
    run_length_steps,
)


def test_textbook_example():
    assert rle_encode("aaabb") == "3a2b"
    groups = rle_groups("aaabb")
    assert [(g.symbol, g.count, g.start) for g in groups] == [("a", 3, 0), ("b", 2, 3)]


def test_run_length_steps_one_per_group():
    steps = run_length_steps("aaabb")
    # intro + one per group + summary
    assert len(steps) == 4
    assert steps[1].encoded == "3a"
    assert steps[2].encoded == "3a2b"
    last = steps[-1]
    assert last.encoded_size == 4
    assert last.ratio == pytest.approx(0.2)
    assert last.result == "20% smaller"


def test_expansion_is_reported_as_larger():
    last = run_length_steps("abc")[-1]
    assert last.encoded == "1a1b1c"
    assert last.result == "100% larger"


@pytest.mark.parametrize("text", ["AAAABBBCCDAA", "1112", "2" * 11, "a\\\\b9", "x"])
def test_decode_inverts_encode(text):
    assert rle_decode(rle_encode(text)) == text


def test_digits_are_escaped():
    assert rle_encode("111") == "3\\1"


@pytest.mark.parametrize("bad", ["a", "3", "12\\"])
def test_decode_rejects_malformed_input(bad):
    with pytest.raises(ValueError):
        rle_decode(bad)


def test_empty_text():
    steps = generate({"text": ""})
    assert len(steps) == 1
    assert steps[0].result == "Nothing to compress"
    assert compression_ratio(0, 0) == 0.0


def test_describe_ratio():
    assert describe_ratio(0.5) == "50% smaller"
    assert describe_ratio(0) == "0% smaller"
    assert describe_ratio(-0.25) == "25% larger"


def test_generate_truncates_long_text():
    steps = generate({"text": "a" * 500})
    assert steps[-1].original_size == 200
