import argparse
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Normalize raw listings in a date/price window and save them as canonical listings."
    )
    parser.add_argument("start_date", help="ISO-8601 start of the creation window (inclusive)")
    parser.add_argument("end_date", help="ISO-8601 end of the creation window (inclusive)")
    parser.add_argument("--min-price", default=None)
    parser.add_argument("--max-price", default=None)
    parser.add_argument("--dry-run", action="store_true", help="normalize and report without saving")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    from app.db import Base, SessionLocal, engine
    from app import services

    try:
        range_filter = services.parse_range_filter(args.start_date, args.end_date, args.min_price, args.max_price)
    except services.InvalidRangeError as e:
        raise SystemExit(f"Invalid range: {e}")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        report = services.fetch_filtered_listings(db, range_filter)
        print(f"Normalized {report.processed_count} listing(s), skipped {report.skipped_count}.")
        for skipped in report.skipped:
            print(f"  skipped {skipped.listing_id}: {skipped.reason}")

        if args.dry_run:
            if report.listings:
                import pprint

                pprint.pprint(report.listings[0].model_dump(by_alias=True))
            return 0

        saved = services.save_listings(db, report.listings)
        print(f"Saved {saved} listing(s) to the listings table.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
