import logging
import os

# Configure logging to reduce verbosity - set at the very beginning
logging.basicConfig(level=logging.WARNING)
logging.getLogger("dagster").setLevel(logging.ERROR)

from dagster import Definitions, job

from .components.fragment_converter import FragmentConverter
from .components.fragment_file_sensor import FragmentFileSensor

JOB_NAME = "fragments_to_sam_job"


def _split_paths(value: str) -> list[str]:
    return [path.strip() for path in value.split(",") if path.strip()]


def build_definitions(
    genome_path: str,
    fragment_paths: list[str],
    output_directory: str = "output",
    mode: str = "paired-end",
) -> Definitions:
    """Wire the converter op into a job and point a sensor at the fragments files."""
    converter = FragmentConverter(
        genome_path=genome_path,
        output_directory=output_directory,
        mode=mode,
    )
    file_sensor = FragmentFileSensor(
        name="fragment_file_sensor",
        fragment_paths=fragment_paths,
        job_name=JOB_NAME,
    )

    convert_op = converter.build_defs(None)
    sensor_def = file_sensor.build_defs(None)

    @job(name=JOB_NAME)
    def fragments_to_sam_job(fragments_path: str):
        """Convert one fragments file per run."""
        convert_op(fragments_path)

    return Definitions(sensors=[sensor_def], jobs=[fragments_to_sam_job])


defs = build_definitions(
    genome_path=os.environ.get("FRAGMENTS_TO_SAM_GENOME", "genome.tsv"),
    fragment_paths=_split_paths(os.environ.get("FRAGMENTS_TO_SAM_FRAGMENTS", "")),
    output_directory=os.environ.get("FRAGMENTS_TO_SAM_OUTPUT_DIR", "output"),
    mode=os.environ.get("FRAGMENTS_TO_SAM_MODE", "paired-end"),
)
