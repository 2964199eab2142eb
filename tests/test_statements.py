"""Tests for the ``?`` placeholder statement builder."""

from datetime import datetime

import pytest

from traffic_events.db.statements import (
    inline_parameters,
    placeholder_positions,
    render_literal,
    to_named_parameters,
)
from traffic_events.errors import StatementError, StorageError

def test_placeholders_inside_quotes_are_ignored():
    sql = "SELECT '?' AS q, \"odd?col\" FROM events WHERE id = ? AND note = 'it''s ?'"
    assert placeholder_positions(sql) == [sql.index('id = ?') + 5]

def test_inline_quotes_strings_and_nulls():
    sql = "INSERT INTO events (latitude, longitude, end_time, note, type) VALUES (?, ?, ?, ?, ?)"
    rendered = inline_parameters(sql, [17.41, 78.48, None, 'Heavy traffic', 'active'])
    assert rendered == (
        "INSERT INTO events (latitude, longitude, end_time, note, type) "
        "VALUES (17.41, 78.48, NULL, 'Heavy traffic', 'active')"
    )

def test_inline_escapes_embedded_quotes():
    rendered = inline_parameters("DELETE FROM events WHERE note = ?", ["x'; DROP TABLE events; --"])
    assert rendered == "DELETE FROM events WHERE note = 'x''; DROP TABLE events; --'"

def test_inline_does_not_touch_question_marks_in_values():
    rendered = inline_parameters("SELECT * FROM events WHERE note = ? AND id = ?", ['why?', 3])
    assert rendered == "SELECT * FROM events WHERE note = 'why?' AND id = 3"

@pytest.mark.parametrize('params', [[], [1, 2]])
def test_count_mismatch_is_rejected(params):
    with pytest.raises(StatementError):
        inline_parameters("DELETE FROM events WHERE id = ?", params)
    with pytest.raises(StatementError):
        to_named_parameters("DELETE FROM events WHERE id = ?", params)

def test_statement_error_is_a_storage_error():
    assert issubclass(StatementError, StorageError)

@pytest.mark.parametrize('value, expected', [
    (None, 'NULL'),
    (True, '1'),
    (False, '0'),
    (42, '42'),
    (-1.5, '-1.5'),
    ('', "''"),
    (datetime(2025, 1, 1, 10, 0), "'2025-01-01 10:00:00'"),
])
def test_render_literal(value, expected):
    assert render_literal(value) == expected

@pytest.mark.parametrize('value', [float('nan'), float('inf'), 'nul\x00byte', object(), [1]])
def test_render_literal_rejects_unsafe_values(value):
    with pytest.raises(StatementError):
        render_literal(value)

def test_unterminated_quote_is_rejected():
    with pytest.raises(StatementError):
        placeholder_positions("SELECT 'oops FROM events WHERE id = ?")

def test_named_parameters():
    sql, params = to_named_parameters(
        "SELECT * FROM events WHERE datetime(start_time) >= datetime(?) AND id <> ?",
        ['2025-01-01 09:00:00', 7]
    )
    assert sql == "SELECT * FROM events WHERE datetime(start_time) >= datetime(:p0) AND id <> :p1"
    assert params == {'p0': '2025-01-01 09:00:00', 'p1': 7}
