#!/usr/bin/env python3
"""
Content Import
Load prompts, challenges, activity breaks, reflection pauses or prompt
packs from a CSV file into their DynamoDB table
"""

import argparse
import csv
import os
import re
from typing import Dict, Iterator, Tuple

import boto3
from pydantic import ValidationError

from prompt_party.application.config import settings
from prompt_party.domain.entities.content import (
    ActivityBreak,
    Challenge,
    Prompt,
    PromptPack,
    ReflectionPause,
)
from prompt_party.infrastructure.dynamodb_content_repository import content_to_item

# CSV kind -> (entity, default table name)
CONTENT_KINDS = {
    "prompts": (Prompt, settings.prompts_table_name),
    "challenges": (Challenge, settings.challenges_table_name),
    "activity-breaks": (ActivityBreak, settings.activity_breaks_table_name),
    "reflection-pauses": (ReflectionPause, settings.reflection_pauses_table_name),
    "packs": (PromptPack, settings.packs_table_name),
}

TRUE_VALUES = {"1", "true", "yes", "y"}
BOOLEAN_COLUMNS = {"is_group", "is_custom"}

# Pack prompt ids are listed in one cell, e.g. "101;102;103"
ID_LIST_SEPARATOR = re.compile(r"[;,|\s]+")


def _clean_row(row: Dict[str, str]) -> Dict[str, object]:
    cleaned = {}
    for key, value in row.items():
        if key is None or value is None:
            continue
        key, value = key.strip(), value.strip()
        if value == "":
            continue
        if key in BOOLEAN_COLUMNS:
            cleaned[key] = value.lower() in TRUE_VALUES
        elif key == "prompt_ids":
            cleaned[key] = [pid for pid in ID_LIST_SEPARATOR.split(value) if pid]
        elif key == "deck":
            cleaned[key] = value.lower()
        else:
            cleaned[key] = value
    return cleaned


def read_rows(csv_path: str, kind: str) -> Iterator[Tuple[int, object]]:
    """Yield (line number, entity) for every valid row, reporting the rest"""
    model, _ = CONTENT_KINDS[kind]
    with open(csv_path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for line_number, row in enumerate(reader, start=2):
            try:
                yield line_number, model.model_validate(_clean_row(row))
            except ValidationError as e:
                problems = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
                )
                print(f"⚠️ Skipping line {line_number}: {problems}")


class ContentImporter:
    def __init__(self, table_name: str, region: str = settings.aws_region):
        self.dynamodb = boto3.resource("dynamodb", region_name=region)
        self.table = self.dynamodb.Table(table_name)

    def import_csv(self, csv_path: str, kind: str, dry_run: bool = False) -> int:
        """Write every valid row to the table, returning how many were written"""
        print(f"📥 Importing {kind} from {csv_path} into {self.table.name}...")

        written = 0
        if dry_run:
            for line_number, content in read_rows(csv_path, kind):
                print(f"🔍 Line {line_number}: {content_to_item(content)}")
                written += 1
            return written

        with self.table.batch_writer(overwrite_by_pkeys=["id"]) as batch:
            for _, content in read_rows(csv_path, kind):
                batch.put_item(Item=content_to_item(content))
                written += 1

        return written


def main():
    parser = argparse.ArgumentParser(description="Import game content from CSV into DynamoDB")
    parser.add_argument("--csv", required=True, help="Path to the CSV file")
    parser.add_argument("--kind", required=True, choices=sorted(CONTENT_KINDS), help="Content kind in the file")
    parser.add_argument("--table", help="Target table name (defaults to the configured table for the kind)")
    parser.add_argument("--region", default=settings.aws_region, help="AWS region")
    parser.add_argument("--dry-run", action="store_true", help="Validate and print rows without writing")

    args = parser.parse_args()

    if not os.path.isfile(args.csv):
        print(f"❌ File not found: {args.csv}")
        raise SystemExit(1)

    table_name = args.table or CONTENT_KINDS[args.kind][1]
    importer = ContentImporter(table_name, region=args.region)
    count = importer.import_csv(args.csv, args.kind, dry_run=args.dry_run)

    if args.dry_run:
        print(f"✅ {count} valid rows (dry run, nothing written)")
    else:
        print(f"✅ Imported {count} rows into {table_name}")


if __name__ == "__main__":
    main()
