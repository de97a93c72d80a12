"""
ABS Census 2021 (QLD) denormalisation pipeline.

Entry point that wires config + pipeline and writes the processed outputs.
"""

from export import write_outputs
from pipeline import (
    age_label_counts,
    build_pipeline,
    default_config,
    preview,
)
from utils import log


def main() -> None:
    print("== QLD Census 2021 preprocessing ==")

    config = default_config()
    outputs = build_pipeline(config)

    # Set to False to skip printing the first rows of the output.
    show_preview = True
    if show_preview:
        preview(outputs.health_analysis, config.preview_rows)

    write_outputs(outputs, config.out_dir)

    print(age_label_counts(outputs.health_analysis))
    log("Preprocessing complete!")


if __name__ == "__main__":
    main()
