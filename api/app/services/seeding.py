import random
import uuid
from typing import Any

from sqlalchemy import func, select

from app import repo
from app.auth.security import hash_password
from app.models import GENDERS, PREFERENCES

DEMO_USERS: list[dict[str, Any]] = [
    {
        "email": "alex@example.com",
        "name": "Alex Johnson",
        "age": 21,
        "gender": "MALE",
        "interested_in": "FEMALE",
        "bio": "Computer Science major. Love hiking and coffee.",
        "image": "https://images.unsplash.com/photo-1500648767791-00dcc994a43e?w=800&auto=format&fit=crop&q=60",
    },
    {
        "email": "sarah@example.com",
        "name": "Sarah Smith",
        "age": 20,
        "gender": "FEMALE",
        "interested_in": "MALE",
        "bio": "Art student. Always looking for the best sushi spot.",
        "image": "https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=800&auto=format&fit=crop&q=60",
    },
    {
        "email": "mike@example.com",
        "name": "Mike Brown",
        "age": 22,
        "gender": "MALE",
        "interested_in": "FEMALE",
        "bio": "Basketball player and foodie.",
        "image": "https://images.unsplash.com/photo-1506794778202-cad84cf45f1d?w=800&auto=format&fit=crop&q=60",
    },
    {
        "email": "emily@example.com",
        "name": "Emily Davis",
        "age": 19,
        "gender": "FEMALE",
        "interested_in": "MALE",
        "bio": "Psychology major. Love reading and traveling.",
        "image": "https://images.unsplash.com/photo-1534528741775-53994a69daeb?w=800&auto=format&fit=crop&q=60",
    },
    {
        "email": "jess@example.com",
        "name": "Jessica Lee",
        "age": 21,
        "gender": "FEMALE",
        "interested_in": "MALE",
        "bio": "Music lover. Play guitar and piano.",
        "image": "https://images.unsplash.com/photo-1524504388940-b1c1722653e1?w=800&auto=format&fit=crop&q=60",
    },
    {
        "email": "chris@example.com",
        "name": "Chris Wilson",
        "age": 23,
        "gender": "MALE",
        "interested_in": "FEMALE",
        "bio": "Engineering student. Tech enthusiast.",
        "image": "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=800&auto=format&fit=crop&q=60",
    },
]

FIRST_NAMES = ["Jordan", "Taylor", "Casey", "Riley", "Morgan", "Avery", "Quinn", "Parker", "Rowan", "Sage"]
LAST_NAMES = ["Garcia", "Nguyen", "Patel", "Kim", "Okafor", "Rossi", "Cohen", "Silva", "Brooks", "Meyer"]
MAJORS = ["Economics", "Biology", "History", "Physics", "Film", "Nursing", "Philosophy", "Architecture"]


def _random_user(rng: random.Random, idx: int) -> dict[str, Any]:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return {
        "email": f"{first.lower()}.{last.lower()}.{idx}@example.com",
        "name": f"{first} {last}",
        "age": rng.randint(18, 26),
        "gender": rng.choice(GENDERS),
        "interested_in": rng.choice(PREFERENCES),
        "bio": f"{rng.choice(MAJORS)} major.",
        "image": f"https://picsum.photos/seed/{first.lower()}{idx}/800/1000",
    }


def _insert_seed_user(db, user: dict[str, Any], password_hash: str) -> bool:
    stmt = (
        repo.dialect_insert(db, repo.users)
        .values(
            id=str(uuid.uuid4()),
            password_hash=password_hash,
            instagram=user.get("instagram") or user["email"].split("@")[0].replace(".", "_"),
            **{k: v for k, v in user.items() if k != "instagram"},
        )
        .on_conflict_do_nothing(index_elements=[repo.users.c.email])
    )
    return db.execute(stmt).rowcount == 1


def seed_demo_users(
    db,
    password: str = "password",
    n_random: int = 0,
    reset: bool = False,
    seed: int = 42,
) -> dict[str, Any]:
    """Load the demo campus users (plus optional random ones). Existing emails are left untouched."""
    rng = random.Random(seed)
    if reset:
        repo.delete_all_users(db)

    password_hash = hash_password(password)
    seed_users = list(DEMO_USERS) + [_random_user(rng, i) for i in range(n_random)]
    created = sum(1 for user in seed_users if _insert_seed_user(db, user, password_hash))
    db.commit()

    total = db.execute(select(func.count()).select_from(repo.users)).scalar_one()
    return {
        "requested": len(seed_users),
        "created": created,
        "skipped_existing": len(seed_users) - created,
        "total_users": int(total),
    }
