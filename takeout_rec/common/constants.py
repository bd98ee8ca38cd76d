"""Application constants."""

RECORD_TYPE = "location"
DEFAULT_OUTPUT_DIR = "rust_output"
# Month is deliberately not zero-padded: 2015-1.rec, 2015-12.rec.
BUCKET_FILENAME_TEMPLATE = "{year}-{month}.rec"
LINE_SEPARATOR = "\t*" + " " * 17 + "\t"
RECORD_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

E7_SCALE = 10_000_000.0
NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MILLI = 1_000_000

INVALID_ROW_POLICIES = ("abort", "skip")
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "bucket",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
