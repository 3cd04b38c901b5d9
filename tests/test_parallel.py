"""Tests for the multiprocessing fan-out parser."""
from __future__ import annotations

import pytest

from elblog.decoder import Decoder
from elblog.errors import ArityError, FieldFormatError, StreamReadError
from elblog.perf.parallel_parser import benchmark, parse_file_parallel, parse_lines_parallel


class TestParseLinesParallel:
    def test_empty_input(self) -> None:
        assert list(parse_lines_parallel([])) == []

    def test_single_worker_matches_decoder(self, tmp_log_file, http_line: str, https_line: str) -> None:
        lines = [http_line, https_line, "bad", http_line]
        path = tmp_log_file(lines)
        with path.open("rb") as fh:
            sequential = [r for _, r in Decoder(fh).iter_results()]
        parallel = list(parse_lines_parallel(lines, workers=1))
        assert parallel[0] == sequential[0]
        assert parallel[1] == sequential[1]
        assert isinstance(parallel[2], ArityError)
        assert parallel[2].line_number == 3
        assert parallel[3] == sequential[3]

    def test_pool_preserves_order(self, http_line: str, https_line: str) -> None:
        lines = [http_line if i % 3 else https_line for i in range(60)]
        lines[17] = http_line.replace("0.000073", "-1")
        results = list(parse_lines_parallel(lines, workers=2, chunksize=5))
        assert len(results) == 60
        bad = results[17]
        assert isinstance(bad, FieldFormatError)
        assert bad.field == "request_processing_time"
        assert bad.line_number == 18
        for i, result in enumerate(results):
            if i == 17:
                continue
            assert result.type == ("https" if i % 3 == 0 else "http")

    @pytest.mark.parametrize("workers", [1, 2])
    def test_input_consumed_lazily(self, http_line: str, workers: int) -> None:
        pulled = 0

        def lines():
            nonlocal pulled
            for _ in range(5000):
                pulled += 1
                yield http_line

        results = parse_lines_parallel(lines(), workers=workers, chunksize=100)
        assert pulled == 0
        first = next(results)
        assert first.sent_bytes == 29
        assert pulled <= workers * 100
        results.close()


class TestParseFileParallel:
    def test_reads_file(self, tmp_log_file, http_line: str) -> None:
        path = tmp_log_file([http_line] * 10)
        results = list(parse_file_parallel(str(path), workers=2, chunksize=3))
        assert len(results) == 10
        assert all(r.sent_bytes == 29 for r in results)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(StreamReadError):
            list(parse_file_parallel(str(tmp_path / "nope.log")))

    def test_benchmark_counts_errors(self, tmp_log_file, http_line: str) -> None:
        path = tmp_log_file([http_line, "junk", http_line])
        result = benchmark(str(path), workers=1)
        assert result["lines"] == 3
        assert result["errors"] == 1
