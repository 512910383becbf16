"""
Generate weekly slot grids for all active practitioners.

Usage:
    python backend/scripts/generate_slots.py [--regenerate]

--regenerate  Delete existing slots and rebuild them from working hours
"""

import argparse
import logging
import sys

from clinic.database import SessionLocal
from clinic.exceptions import SchedulingError
from clinic.services.slots import SlotStore

logger = logging.getLogger("generate_slots")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--regenerate", action="store_true", help="delete and rebuild existing slots")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    db = SessionLocal()
    try:
        created = SlotStore(db).generate_all(regenerate=args.regenerate)
    except SchedulingError as e:
        logger.error(f"Slot generation failed: {e.message}")
        return 1
    finally:
        db.close()

    logger.info(f"Slots generated for {len(created)} practitioners ({sum(created.values())} rows)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
