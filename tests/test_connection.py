from conftest import FakeTransport, FixedWindows
from core.contracts import Timestamp, Window
from server_core.listener import Listener


def make_conn(session):
    conn = Listener(session)()
    transport = FakeTransport()
    conn.connection_made(transport)
    return conn, transport


def test_initial_arm_sends_status_and_joins(session, clock):
    conn, transport = make_conn(session)
    assert transport.lines() == ["1.500000 0 0"]
    assert conn in session.connections
    assert conn.deadline == Timestamp(clock.current.sec + 1, 500_000)
    assert conn.deadline > clock.current


def test_on_time_byte_scores_and_rearms(session, clock):
    session.windows = FixedWindows(Window(2, 0), Window(0, 250_000))
    conn, transport = make_conn(session)

    clock.set(clock.current.sec + 1, 0)
    conn.data_received(b'x')

    assert session.score == 1 and session.max_score == 1
    # numbers in the new line reflect the increment
    assert transport.lines() == ["2.000000 0 0", "0.250000 1 1"]
    assert conn.deadline == Timestamp(clock.current.sec, 250_000)


def test_byte_at_exact_deadline_is_on_time(session, clock):
    conn, _ = make_conn(session)
    clock.set(conn.deadline.sec, conn.deadline.usec)
    assert conn.is_ready()
    conn.data_received(b'.')
    assert session.score == 1
    assert conn in session.connections


def test_byte_one_microsecond_late_ends_round(session, clock, report):
    conn, transport = make_conn(session)
    other, other_transport = make_conn(session)
    session.increase_score()

    clock.set(conn.deadline.sec, conn.deadline.usec + 1)
    assert not conn.is_ready()
    conn.data_received(b'.')

    assert transport.closed and other_transport.closed
    assert session.connections == set()
    assert session.round_timer is None
    assert report.getvalue() == "1 / 1\n"


def test_later_second_is_late_whatever_the_microseconds(session):
    conn, _ = make_conn(session)
    deadline = conn.deadline
    assert not conn.is_ready(Timestamp(deadline.sec + 1, 0))
    assert conn.is_ready(Timestamp(deadline.sec - 1, 999_999))


def test_empty_read_is_end_of_stream(session, report):
    conn, transport = make_conn(session)
    other, other_transport = make_conn(session)

    conn.data_received(b'')

    assert transport.closed
    assert not other_transport.closed
    assert session.connections == {other}
    assert session.round_timer is not None
    assert report.getvalue() == ""


def test_stream_error_destroys_only_that_connection(session):
    conn, transport = make_conn(session)
    other, _ = make_conn(session)
    conn.connection_lost(ConnectionResetError("reset by peer"))
    assert transport.closed
    assert session.connections == {other}


def test_destroy_is_idempotent(session):
    conn, transport = make_conn(session)
    conn.destroy()
    conn.connection_lost(None)
    assert transport.closed
    assert conn.transport is None
    assert conn not in session.connections


def test_data_after_reset_is_ignored(session, report):
    conn, _ = make_conn(session)
    conn.destroy()
    conn.data_received(b'late')
    assert session.score == 0
    assert report.getvalue() == ""


def test_score_counts_on_time_arrivals(session, clock):
    conn, _ = make_conn(session)
    second, _ = make_conn(session)
    for i in range(5):
        target = conn if i % 2 == 0 else second
        target.data_received(b'.')
    assert session.score == 5
    assert session.max_score == 5
