from app.models import DIRECTIONS

INTERESTED_DIRECTIONS = {"RIGHT", "FRIEND"}

# Pair states reported by the match engine. Matched is terminal.
ONE_SIDED = "one_sided"
MATCHED = "matched"


def is_valid_direction(direction: str) -> bool:
    return direction in DIRECTIONS


def is_interested(direction: str | None) -> bool:
    return direction in INTERESTED_DIRECTIONS


def match_type_for(direction: str, reverse_direction: str) -> str:
    # A FRIEND on either side collapses the pair to the platonic type.
    if direction == "FRIEND" or reverse_direction == "FRIEND":
        return "FRIEND"
    return "DATE"
