from app.services.state_machine import is_interested, is_valid_direction, match_type_for


def test_directions_and_interest():
    assert is_valid_direction("LEFT")
    assert is_valid_direction("RIGHT")
    assert is_valid_direction("FRIEND")
    assert not is_valid_direction("UP")
    assert not is_valid_direction("right")

    assert is_interested("RIGHT") is True
    assert is_interested("FRIEND") is True
    assert is_interested("LEFT") is False
    assert is_interested(None) is False


def test_match_type_collapses_to_friend():
    assert match_type_for("RIGHT", "RIGHT") == "DATE"
    assert match_type_for("FRIEND", "RIGHT") == "FRIEND"
    assert match_type_for("RIGHT", "FRIEND") == "FRIEND"
    assert match_type_for("FRIEND", "FRIEND") == "FRIEND"
