"""Tests for the kstat file parsers"""
import io

import pytest

from metrics.models import CollectionWarnings, PoolIOStats
from collectors.errors import ErrorKind, MissingHeaderError, PoolStateError, ValueParseError
from collectors.parsers import parse_global_stats, parse_pool_io_stats, parse_pool_state, parse_uint64
from conftest import ARCSTATS, IO_HEADER, POOL_IO


class TestParseUint64:
    """Test unsigned 64-bit integer parsing"""
    
    def test_valid_values(self):
        assert parse_uint64("0") == 0
        assert parse_uint64("18446744073709551615") == 2 ** 64 - 1
    
    @pytest.mark.parametrize("text", ["", "-1", "+5", "1_000", " 5", "0x10", "1.5", "abc", "18446744073709551616"])
    def test_invalid_values(self, text):
        with pytest.raises(ValueError):
            parse_uint64(text)


class TestParseGlobalStats:
    """Test parsing of the arcstats name/type/data table"""
    
    def setup_method(self):
        self.warnings = CollectionWarnings()
    
    def test_well_formed_input(self):
        metrics = parse_global_stats(io.StringIO(ARCSTATS), self.warnings)
        
        assert metrics == {"hits": 50, "misses": 5, "size": 1024, "c_max": 8589934592}
        assert len(self.warnings) == 0
    
    def test_other_type_tags_are_skipped(self):
        content = (
            "name type data\n"
            "size 4 1024\n"
            "arc_meta 3 -12\n"
            "label 7 hello\n"
            "memory_throttle_count 3 100\n"
        )
        metrics = parse_global_stats(io.StringIO(content), self.warnings)
        
        assert metrics == {"size": 1024}
        assert len(self.warnings) == 0
    
    def test_lines_before_header_are_ignored(self):
        content = "size 4 1\nname type data\nhits 4 2\n"
        
        assert parse_global_stats(io.StringIO(content), self.warnings) == {"hits": 2}
    
    def test_short_lines_are_skipped(self):
        content = "name type data\nhits 4 2\n\nmisses 4\n"
        
        assert parse_global_stats(io.StringIO(content), self.warnings) == {"hits": 2}
    
    def test_missing_header(self):
        content = "hits 4 50\nmisses 4 5\n"
        
        with pytest.raises(MissingHeaderError) as exc_info:
            parse_global_stats(io.StringIO(content), self.warnings)
        
        assert exc_info.value.kind is ErrorKind.MISSING_HEADER
        assert "no global statistics" in str(exc_info.value)
    
    def test_header_must_match_exactly(self):
        with pytest.raises(MissingHeaderError):
            parse_global_stats(io.StringIO("name type data extra\nhits 4 1\n"), self.warnings)
    
    def test_malformed_value_is_skipped_with_warning(self):
        content = "name type data\nsize 4 1024\nhits 4 not-a-number\nmisses 4 5\n"
        metrics = parse_global_stats(io.StringIO(content), self.warnings)
        
        assert metrics == {"size": 1024, "misses": 5}
        assert self.warnings.messages == ["could not parse metric [hits] as uint64: not-a-number"]


class TestParsePoolState:
    """Test parsing of the pool state file"""
    
    def test_state_is_trimmed_and_upper_cased(self):
        assert parse_pool_state(io.StringIO("  online\n")) == "ONLINE"
    
    def test_only_first_line_is_read(self):
        assert parse_pool_state(io.StringIO("DEGRADED\nONLINE\n")) == "DEGRADED"
    
    def test_any_token_is_accepted(self):
        assert parse_pool_state(io.StringIO("suspended")) == "SUSPENDED"
    
    def test_empty_file(self):
        with pytest.raises(PoolStateError) as exc_info:
            parse_pool_state(io.StringIO(""))
        
        assert "EOF" in str(exc_info.value)
        assert exc_info.value.kind is ErrorKind.STATE_UNREADABLE
    
    def test_read_error(self):
        class BrokenStream(io.StringIO):
            def readline(self, *args):
                raise OSError("Input/output error")
        
        with pytest.raises(PoolStateError) as exc_info:
            parse_pool_state(BrokenStream())
        
        assert "Input/output error" in str(exc_info.value)


class TestParsePoolIOStats:
    """Test parsing of the pool io table"""
    
    def test_well_formed_input(self):
        stats = parse_pool_io_stats(io.StringIO(POOL_IO))
        
        assert stats == PoolIOStats(read_count=10, write_count=20, bytes_read=2048, bytes_written=4096)
    
    def test_missing_header_yields_zero_stats(self):
        stats = parse_pool_io_stats(io.StringIO("12 3 0x00 1 80 2354235 2342352\n1 2 3\n"))
        
        assert stats == PoolIOStats()
    
    def test_empty_file_yields_zero_stats(self):
        assert parse_pool_io_stats(io.StringIO("")) == PoolIOStats()
    
    def test_short_header_is_not_accepted(self):
        content = "nread nwritten reads writes\n1 2 3 4\n"
        
        assert parse_pool_io_stats(io.StringIO(content)) == PoolIOStats()
    
    def test_column_order_follows_header(self):
        header = "nread wtime reads nwritten wlentime writes wupdate rtime rlentime rupdate wcnt rcnt"
        row = "1 0 2 3 0 4 0 0 0 0 0 0"
        stats = parse_pool_io_stats(io.StringIO(f"{header}\n{row}\n"))
        
        assert stats == PoolIOStats(read_count=2, write_count=4, bytes_read=1, bytes_written=3)
    
    def test_last_row_wins(self):
        content = (
            f"{IO_HEADER}\n"
            "1 2 3 4 0 0 0 0 0 0 0 0\n"
            "5 6 7 8 0 0 0 0 0 0 0 0\n"
        )
        stats = parse_pool_io_stats(io.StringIO(content))
        
        assert stats == PoolIOStats(read_count=7, write_count=8, bytes_read=5, bytes_written=6)
    
    def test_non_numeric_value_names_column(self):
        content = f"{IO_HEADER}\n2048 4096 10 20 x 0 0 0 0 0 0 0\n"
        
        with pytest.raises(ValueParseError) as exc_info:
            parse_pool_io_stats(io.StringIO(content))
        
        assert exc_info.value.key == "wtime"
        assert exc_info.value.value == "x"
        assert "wtime" in str(exc_info.value)
    
    def test_unrecognised_column_must_still_be_numeric(self):
        content = f"{IO_HEADER}\n2048 4096 10 20 0 0 0 0 0 0 0 -1\n"
        
        with pytest.raises(ValueParseError) as exc_info:
            parse_pool_io_stats(io.StringIO(content))
        
        assert exc_info.value.key == "rcnt"
    
    def test_short_row_names_missing_column(self):
        content = f"{IO_HEADER}\n2048 4096 10\n"
        
        with pytest.raises(ValueParseError) as exc_info:
            parse_pool_io_stats(io.StringIO(content))
        
        assert exc_info.value.key == "writes"
    
    def test_blank_lines_after_header_are_skipped(self):
        content = f"{IO_HEADER}\n2048 4096 10 20 0 0 0 0 0 0 0 0\n\n"
        
        assert parse_pool_io_stats(io.StringIO(content)).bytes_read == 2048
