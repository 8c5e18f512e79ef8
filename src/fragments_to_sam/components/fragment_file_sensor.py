"""
Fragment File Sensor Component

A sensor component that detects fragments files and triggers conversion jobs.
"""

import os

import dagster
from dagster import RunRequest, sensor

from .stream_fragments import FragmentFileStats


class FragmentFileSensor(dagster.Model, dagster.Resolvable):
    """
    Sensor component for triggering fragment conversion jobs.

    Requests one run per configured fragments file. The run key includes the
    file's modification time, so a rewritten file is converted again.
    """

    name: str = "fragment_file_sensor"
    fragment_paths: list[str] = []
    job_name: str = "fragments_to_sam_job"
    minimum_interval_seconds: int = 30

    def build_defs(self, context):
        @sensor(
            name=self.name,
            job_name=self.job_name,
            minimum_interval_seconds=self.minimum_interval_seconds,
        )
        def fragment_file_sensor_fn(context):
            """Yield a RunRequest for every configured fragments file present on disk."""
            if not self.fragment_paths:
                context.log.info("No fragments files configured for sensor")
                return

            for fragments_path in self.fragment_paths:
                if not os.path.isfile(fragments_path):
                    context.log.debug(
                        f"Fragments file not available: {fragments_path}"
                    )
                    continue

                stats = FragmentFileStats.from_path(fragments_path)
                compression = "compressed" if stats.compressed else "plain text"
                context.log.info(
                    f"📊 Fragments file {fragments_path}: "
                    f"{stats.size_bytes:,} bytes ({compression})"
                )

                yield RunRequest(
                    run_key=f"{fragments_path}_{int(stats.modified_time)}",
                    run_config={
                        "inputs": {
                            "fragments_path": fragments_path,
                        }
                    },
                    tags={
                        "fragments_path": fragments_path,
                        "job_type": "fragments_to_sam",
                    },
                )

        return fragment_file_sensor_fn
