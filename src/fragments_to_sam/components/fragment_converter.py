"""
Fragment Converter Component

An ops-based component that streams a fragments file into SAM/BAM without
buffering it in memory.
"""

from pathlib import Path
from typing import Any, Dict

import dagster
from dagster import Out, op

from .errors import FragmentsToSamError
from .pipeline import DEFAULT_LOG_EVERY, convert_files
from .types import ErrorPolicy, OutputMode
from .writers import OUTPUT_FORMATS


def output_path_for(
    fragments_path: str, output_directory: str, output_format: str
) -> Path:
    """``<output_directory>/<fragments name without .tsv/.gz>.<sam|bam>``"""
    name = Path(fragments_path).name
    for suffix in (".gz", ".tsv", ".bed"):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
    return Path(output_directory) / f"{name}.{output_format}"


class FragmentConverter(dagster.Model, dagster.Resolvable):
    """
    Component for converting fragments files to alignments.

    The op reads the genome once per run, then streams the fragments file
    line by line straight into the output writer.
    """

    name: str = "fragment_converter"
    genome_path: str
    output_directory: str = "output"
    mode: str = OutputMode.PAIRED_END.value
    output_format: str = "bam"
    skip_malformed: bool = True
    log_every: int = DEFAULT_LOG_EVERY

    def build_defs(self, context):
        mode = OutputMode.parse(self.mode)
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format}")
        error_policy = ErrorPolicy.SKIP if self.skip_malformed else ErrorPolicy.FAIL

        @op(
            name=self.name,
            out=Out(Dict[str, Any]),
            description="Converts a fragments file to synthetic alignments",
        )
        def convert_fragments_op(context, fragments_path: str) -> Dict[str, Any]:
            """
            Op that converts one fragments file.

            Returns the conversion counters together with the output path.
            """
            output_path = output_path_for(
                fragments_path, self.output_directory, self.output_format
            )
            output_path.parent.mkdir(parents=True, exist_ok=True)

            context.log.info(
                f"🎯 Converting {fragments_path} → {output_path} ({mode.value})"
            )

            try:
                stats = convert_files(
                    fragments_path,
                    self.genome_path,
                    str(output_path),
                    mode,
                    output_format=self.output_format,
                    error_policy=error_policy,
                    log_every=self.log_every,
                    log=context.log,
                )
            except (FragmentsToSamError, OSError) as e:
                context.log.error(f"❌ Error during conversion: {e}")
                raise

            context.log.info(
                f"🎉 Conversion complete: {stats.records_written} records → {output_path}"
            )

            result = stats.as_dict()
            result["output_path"] = str(output_path)
            return result

        return convert_fragments_op
