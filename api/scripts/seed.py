import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from app.database import Base, SessionLocal, engine
from app import models  # noqa: F401
from app.services.seeding import seed_demo_users


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo Campus Swipe users")
    parser.add_argument("--n-random", type=int, default=0)
    parser.add_argument("--password", type=str, default="password")
    parser.add_argument("--reset", action="store_true")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        summary = seed_demo_users(
            db,
            password=args.password,
            n_random=args.n_random,
            reset=args.reset,
            seed=args.seed,
        )

    print("Seed completed")
    for k, v in summary.items():
        print(f"- {k}: {v}")


if __name__ == "__main__":
    main()
