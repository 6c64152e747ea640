"""
StrandSplit reorientation pipeline.

End-to-end coordinator for mixed-orientation long reads:
- Classify: alignment records -> per-read strand classification
- Partition: forward / reverse / ambiguous read ID sets
- Reorient: extract forward and reverse reads, reverse-complement the
  reverse reads, merge forward-first
- Write: rename the merged stream and write the final sequence file

Alignments are produced upstream (e.g. minimap2 -x map-ont, PAF output);
this pipeline starts from the alignment records and the original reads.
"""

from pathlib import Path
from typing import Optional, Dict, Any, Tuple, Union, Iterable
from dataclasses import dataclass
import logging
import threading
import time
import warnings

from ..io import (
    BiopythonReverseComplementer,
    BiopythonSubsetExtractor,
    SeqtkReverseComplementer,
    SeqtkSubsetExtractor,
    detect_sequence_format,
    load_sequences,
    open_file,
    read_ids_in_file,
    rename_reads,
    write_sequences,
)
from ..orientation import (
    ClassificationCancelled,
    EmptyInputWarning,
    Partition,
    ReaderStats,
    ReorientationCoordinator,
    ReorientationResult,
    StrandClassifier,
    classify_parallel,
    partition_reads,
    read_alignment_records,
)

logger = logging.getLogger(__name__)

PIPELINE_STEPS = ['classify', 'reorient', 'write']


# ============================================================================
# Data Structures
# ============================================================================

@dataclass
class ClassificationStats:
    """Statistics from the classification step."""
    records: int = 0
    malformed: int = 0
    reads_classified: int = 0
    forward: int = 0
    reverse: int = 0
    ambiguous: int = 0
    unmapped: Optional[int] = None  # None when the read collection was not inspected
    elapsed_sec: float = 0.0

    def summary(self) -> str:
        """Return human-readable summary."""
        lines = [
            "Classification Summary:",
            f"  Records: {self.records:,} ({self.malformed:,} malformed skipped)",
            f"  Forward IDs: {self.forward:,}",
            f"  Reverse IDs: {self.reverse:,}",
            f"  Ambiguous IDs excluded: {self.ambiguous:,}",
        ]
        if self.unmapped is not None:
            lines.append(f"  Unmapped reads dropped: {self.unmapped:,}")
        lines.append(f"  Time: {self.elapsed_sec:.1f}s")
        return "\n".join(lines)


# ============================================================================
# Classification
# ============================================================================

def classify_alignments(
    source: Union[str, Path, Iterable[str]],
    read_id_column: int = 1,
    strand_column: int = 5,
    strict: bool = False,
    comment_prefix: Optional[str] = '#',
    workers: int = 1,
    chunk_size: int = 100000,
    cancel_event: Optional[threading.Event] = None
) -> Tuple[Partition, ReaderStats]:
    """
    Read alignment records and partition the reads by strand.

    Args:
        source: Alignment record file (can be gzipped) or iterable of lines
        read_id_column: 1-based column holding the read ID
        strand_column: 1-based column holding the strand symbol
        strict: Abort on the first malformed record
        comment_prefix: Lines starting with this prefix are ignored
        workers: Worker processes (>1 uses chunked parallel accumulation)
        chunk_size: Lines per chunk for parallel accumulation
        cancel_event: Abandon classification when set

    Returns:
        (Partition, ReaderStats)

    Raises:
        MalformedRecordError: In strict mode, on the first malformed record
        ClassificationCancelled: If cancel_event was set before the stream ended
    """
    stats = ReaderStats()

    if workers > 1:
        options = dict(
            workers=workers,
            chunk_size=chunk_size,
            read_id_column=read_id_column,
            strand_column=strand_column,
            strict=strict,
            comment_prefix=comment_prefix,
            stats=stats,
            cancel_event=cancel_event,
        )
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"Alignment record file not found: {path}")
            with open_file(path, 'r') as handle:
                calls = classify_parallel(handle, **options)
        else:
            calls = classify_parallel(source, **options)
    else:
        records = read_alignment_records(
            source,
            read_id_column=read_id_column,
            strand_column=strand_column,
            strict=strict,
            comment_prefix=comment_prefix,
            stats=stats,
        )
        classifier = StrandClassifier()
        if not classifier.update(records, cancel_event=cancel_event):
            raise ClassificationCancelled(
                f"Classification cancelled after {classifier.records_observed:,} records"
            )
        calls = classifier.classifications()

    if stats.malformed:
        logger.warning(
            f"Skipped {stats.malformed:,} malformed record(s) "
            f"(first at line(s) {', '.join(map(str, stats.malformed_lines))})"
        )

    if stats.records == 0:
        logger.warning("No alignment records observed; all read sets are empty")
        warnings.warn("No alignment records observed", EmptyInputWarning, stacklevel=2)

    partition = partition_reads(calls)
    logger.info(
        f"Forward IDs: {len(partition.forward):,}  Reverse IDs: {len(partition.reverse):,}  "
        f"Ambiguous IDs excluded: {len(partition.ambiguous):,}"
    )

    return partition, stats


# ============================================================================
# Pipeline
# ============================================================================

def build_collaborators(extraction: Dict[str, Any]) -> Tuple[Any, Any]:
    """
    Create the extractor and reverse complementer for a backend.

    Args:
        extraction: 'extraction' configuration section

    Returns:
        (extractor, reverse_complementer)
    """
    backend = extraction.get('backend', 'biopython')

    if backend == 'biopython':
        return BiopythonSubsetExtractor(), BiopythonReverseComplementer()

    elif backend == 'seqtk':
        seqtk_dir = extraction.get('seqtk_dir')
        tmp_dir = extraction.get('tmp_dir')
        return (
            SeqtkSubsetExtractor(seqtk_dir=seqtk_dir, tmp_dir=tmp_dir),
            SeqtkReverseComplementer(seqtk_dir=seqtk_dir, tmp_dir=tmp_dir),
        )

    else:
        raise ValueError(f"Unknown extraction backend: {backend}. Must be one of: biopython, seqtk")


class ReorientationPipeline:
    """
    Runs classification, reorientation and output writing for one sample.

    Expects a configuration dictionary shaped like DEFAULT_CONFIG plus a
    'runtime' section with 'reads', 'alignments' and 'output_dir'.
    """

    def __init__(self, config: Dict[str, Any], configure_logging: bool = True):
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration dictionary
            configure_logging: Attach file and console log handlers
        """
        self.config = config
        self.output_dir = Path(config['runtime']['output_dir'])
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self.reads_path = Path(config['runtime']['reads'])
        self.alignments_path = Path(config['runtime']['alignments'])
        self.prefix = config['output']['prefix']

        if configure_logging:
            log_level = getattr(logging, config['output']['logging']['level'])
            logging.basicConfig(
                level=log_level,
                format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                handlers=[
                    logging.FileHandler(self.output_dir / config['output']['logging']['log_file']),
                    logging.StreamHandler()
                ]
            )
        self.logger = logging.getLogger(f"{__name__}.ReorientationPipeline")

        self.steps = list(PIPELINE_STEPS)
        self.cancel_event = threading.Event()

        # Runtime state
        self.state: Dict[str, Any] = {
            'current_step': None,
            'completed_steps': [],
            'partition': None,
            'stats': ClassificationStats(),
            'result': None,
            'output_file': None,
        }

    def cancel(self):
        """Request cancellation of a running classification."""
        self.cancel_event.set()

    def run(self) -> Dict[str, Any]:
        """
        Run the complete pipeline.

        Returns:
            Pipeline execution summary
        """
        self.logger.info("=" * 60)
        self.logger.info("Starting StrandSplit reorientation")
        self.logger.info("=" * 60)
        self.logger.info(f"Reads: {self.reads_path}")
        self.logger.info(f"Alignments: {self.alignments_path}")

        if not self.reads_path.exists():
            raise FileNotFoundError(f"Reads file not found: {self.reads_path}")

        for i, step in enumerate(self.steps):
            self.state['current_step'] = step
            self.logger.info(f"STEP {i + 1}/{len(self.steps)}: {step.upper()}")

            try:
                self._execute_step(step)
                self.state['completed_steps'].append(step)
            except Exception as e:
                self.logger.error(f"Step {step} failed: {e}")
                raise

        stats = self.state['stats']
        result = self.state['result']

        self.logger.info(stats.summary())
        self.logger.info(f"Final output: {self.state['output_file']}")

        return {
            "status": "success",
            "steps_completed": len(self.state['completed_steps']),
            "output_file": str(self.state['output_file']),
            "forward": result.forward_count,
            "reverse": result.reverse_count,
            "ambiguous": result.ambiguous_excluded,
            "unmapped": stats.unmapped,
            "malformed": stats.malformed,
        }

    def _execute_step(self, step: str):
        """Execute a single pipeline step."""
        if step == 'classify':
            self._step_classify()
        elif step == 'reorient':
            self._step_reorient()
        elif step == 'write':
            self._step_write()
        else:
            raise ValueError(f"Unknown step: {step}")

    def _step_classify(self):
        """Classify reads by alignment strand and partition them."""
        records_cfg = self.config['records']
        classification_cfg = self.config['classification']

        start = time.time()
        partition, reader_stats = classify_alignments(
            self.alignments_path,
            read_id_column=records_cfg['read_id_column'],
            strand_column=records_cfg['strand_column'],
            strict=records_cfg['strict'],
            comment_prefix=records_cfg.get('comment_prefix'),
            workers=classification_cfg['workers'],
            chunk_size=classification_cfg['chunk_size'],
            cancel_event=self.cancel_event,
        )

        stats = self.state['stats']
        stats.records = reader_stats.records
        stats.malformed = reader_stats.malformed
        stats.reads_classified = len(partition.all_reads)
        stats.forward = len(partition.forward)
        stats.reverse = len(partition.reverse)
        stats.ambiguous = len(partition.ambiguous)
        stats.elapsed_sec = time.time() - start

        if self.config['output']['keep_id_lists']:
            written = partition.write_id_lists(self.output_dir, self.prefix)
            self.logger.info(f"Read ID lists written: {', '.join(p.name for p in written.values())}")

        self.state['partition'] = partition

    def _step_reorient(self):
        """Extract, reverse-complement and merge reads."""
        partition = self.state['partition']
        extraction = self.config['extraction']
        extractor, reverse_complementer = build_collaborators(extraction)

        if extraction.get('backend', 'biopython') == 'biopython':
            reads = load_sequences(self.reads_path)
            read_ids = [record.id for record in reads]
        else:
            reads = self.reads_path
            read_ids = None

        if self.config['output']['report_unmapped']:
            if read_ids is None:
                read_ids = read_ids_in_file(self.reads_path)
            unmapped = len(set(read_ids) - partition.all_reads)
            self.state['stats'].unmapped = unmapped
            self.logger.info(f"Unmapped reads dropped (no alignment records): {unmapped:,}")

        coordinator = ReorientationCoordinator(extractor, reverse_complementer)
        self.state['result'] = coordinator.reorient(reads, partition)

    def _step_write(self):
        """Rename the merged stream and write the final file."""
        result: ReorientationResult = self.state['result']
        output_cfg = self.config['output']

        records = result.reads
        if output_cfg['rename']:
            records = rename_reads(records, self.prefix)

        file_format = output_cfg.get('format') or detect_sequence_format(self.reads_path)
        extension = 'fq' if file_format == 'fastq' else 'fa'
        output_file = self.output_dir / f"{self.prefix}.rc.{extension}"
        if output_cfg['compress']:
            output_file = Path(str(output_file) + '.gz')

        count = write_sequences(records, output_file, file_format=file_format)
        self.logger.info(f"✓ Wrote {count:,} reoriented reads to {output_file}")

        self.state['output_file'] = output_file


__all__ = [
    'PIPELINE_STEPS',
    'ClassificationStats',
    'classify_alignments',
    'build_collaborators',
    'ReorientationPipeline',
]
