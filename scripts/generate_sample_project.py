#!/usr/bin/env python3
"""Create a sample project through the wizard.

Drives every wizard step with Faker-generated basics and writes the
result to the JSON file backend, for demos and manual validation.
"""

import argparse
import sys

from live_grouping.backends import JsonFileBackend, LocalMediaStore
from live_grouping.config import LiveGroupingConfig
from live_grouping.exceptions import LiveGroupingError
from live_grouping.generators import SampleProjectGenerator
from live_grouping.logging import get_logger, setup_logging
from live_grouping.models import COMPONENT_TYPES, PropertyType
from live_grouping.wizard import WizardController

logger = get_logger(__name__)


def build_project(
    wizard: WizardController,
    project_type: PropertyType,
    basics: dict,
    towers: int,
    commercial_units: int,
) -> None:
    """Walk the wizard through steps 1-4 for the given type."""
    wizard.choose_type(project_type)
    wizard.next_step()
    wizard.set_basics(**basics)
    wizard.next_step()

    if project_type == PropertyType.MIXED_USE:
        for component in (PropertyType.APARTMENT, PropertyType.COMMERCIAL):
            wizard.toggle_component(component, True)

    for component in wizard.project.property_types:
        if component == PropertyType.COMMERCIAL:
            wizard.update_config(component, "total_units", commercial_units)
            continue
        for _ in range(towers - 1):
            wizard.add_tower(component)
        for index in range(len(wizard.store.towers_for(component))):
            wizard.populate_tower(component, index)

    wizard.next_step()
    wizard.next_step()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a sample project with its full hierarchy")
    parser.add_argument(
        "--type",
        type=str,
        choices=[t.value for t in (*COMPONENT_TYPES, PropertyType.MIXED_USE)],
        default=PropertyType.APARTMENT.value,
        help="Project type (default: apartment)",
    )
    parser.add_argument(
        "--towers",
        type=int,
        default=2,
        help="Towers per component type (default: 2)",
    )
    parser.add_argument(
        "--commercial-units",
        type=int,
        default=12,
        help="Units in the commercial block (default: 12)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--log-format",
        type=str,
        choices=["standard", "json"],
        default="standard",
        help="Log output format",
    )
    args = parser.parse_args()

    config = LiveGroupingConfig.from_env()
    setup_logging(config.log_level, args.log_format)
    seed = args.seed if args.seed is not None else config.seed

    media = LocalMediaStore(config.media.media_dir, config.media.base_url)
    backend = JsonFileBackend(config.storage.data_dir, pretty=config.storage.pretty_json, media=media)
    wizard = WizardController(backend, media=media, defaults=config.unit_defaults)

    try:
        basics = SampleProjectGenerator(seed=seed, locale=config.locale).generate_basics()
        build_project(wizard, PropertyType(args.type), basics, max(args.towers, 1), args.commercial_units)
        summary = wizard.summary()
        project_id = wizard.submit()
    except LiveGroupingError as exc:
        logger.error("Sample project failed: %s", exc)
        sys.exit(1)

    logger.info("Created project %s with %d slots in %s", project_id, summary.total_slots, backend.path)


if __name__ == "__main__":
    main()
