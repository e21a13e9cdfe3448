from simulations import packet_switching
from simulations.packet_switching import (
    ROUTES,
    Packet,
    packet_steps,
    partial_reassembly,
    reassemble,
    split_packets,
)


def test_split_assigns_sequence_and_routes():
    packets = split_packets("Hello", 2)
    assert [p.data for p in packets] == ["He", "ll", "o"]
    assert [p.seq for p in packets] == [1, 2, 3]
    assert packets[1].route == ROUTES[1]
    assert all(p.hop == -1 and not p.arrived for p in packets)


def test_message_is_reassembled_only_at_the_end():
    steps = packet_steps("Hello", 2)
    assert steps[-1].result == 'Reassembled "Hello"'
    assert reassemble(steps[-1].packets) == "Hello"
    assert all(s.result is None for s in steps[:-2])
    assert reassemble(steps[0].packets) is None


def test_packets_are_staggered_and_move_one_hop_per_tick():
    steps = packet_steps("abcd", 1)
    first_tick = steps[1].packets
    assert first_tick[0].hop == 0
    assert all(p.hop == -1 for p in first_tick[1:])
    for prev, cur in zip(steps, steps[1:]):
        for a, b in zip(prev.packets, cur.packets):
            assert b.hop - a.hop in (0, 1)


def test_run_ends_after_a_quiet_tick():
    steps = packet_steps("Hi there", 3)
    assert steps[-1].packets == steps[-2].packets
    assert all(p.arrived for p in steps[-1].packets)
    assert steps[-1].is_final


def test_reassembly_orders_by_sequence_not_arrival():
    packets = (
        Packet(2, "lo", ROUTES[0], "#000", hop=4, arrived=True),
        Packet(1, "Hel", ROUTES[1], "#000", hop=3, arrived=True),
    )
    assert reassemble(packets) == "Hello"


def test_partial_reassembly_marks_missing_packets():
    packets = (
        Packet(1, "ab", ROUTES[0], "#000", hop=4, arrived=True),
        Packet(2, "cd", ROUTES[1], "#000", hop=1),
    )
    assert partial_reassembly(packets) == "ab | ░░"
    done = tuple(Packet(p.seq, p.data, p.route, p.colour, len(p.route) - 1, True) for p in packets)
    assert partial_reassembly(done) == '"abcd"'


def test_empty_message():
    steps = packet_switching.generate({"message": "", "packet_size": 2})
    assert len(steps) == 1
    assert steps[0].result == "Nothing to send"


def test_sanitize_clamps_packet_size():
    assert packet_switching.sanitize_params({"message": "x", "packet_size": 99})["packet_size"] == 5
    assert packet_switching.sanitize_params({"message": None, "packet_size": "0"}) == {
        "message": "", "packet_size": 1,
    }
