#!/usr/bin/env python3
"""
Seed the configured database with sample CDMs.
Idempotent for the placeholder model: it is only created if missing.

Usage (from project root):
  python scripts/seed_test_model.py            # placeholder model
  python scripts/seed_test_model.py --adder    # also add a fresh adder model
"""
import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--adder", action="store_true", help="also create a fresh adder test model")
    args = parser.parse_args()

    from cdm_api import models_db  # noqa: F401
    from cdm_api.database import Base, SessionLocal, engine
    from cdm_api.services.model_store import ModelStore
    from cdm_api.services.test_data import build_placeholder_model, build_test_model

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        store = ModelStore(db)
        placeholder = build_placeholder_model()
        if store.exists(placeholder.meta.uuid):
            print(f"Placeholder model already present (id={placeholder.meta.uuid})")
        else:
            store.create(placeholder)
            print(f"Seeded model: {placeholder.meta.name} (id={placeholder.meta.uuid})")
        if args.adder:
            adder = store.create(build_test_model())
            print(f"Seeded model: {adder.meta.name} (id={adder.meta.uuid})")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
