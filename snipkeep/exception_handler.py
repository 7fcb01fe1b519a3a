import logging
import traceback
from typing import Dict, Any, List, Optional


class ErrorHandler:
    """Centralized error handling and logging for snippet import and export.

    Logging is only configured when ``log_level`` is given; library callers
    that pass nothing keep whatever setup the application made.
    """

    def __init__(self, log_level: Optional[str] = None):
        if log_level is None:
            self.logger = logging.getLogger("snipkeep")
        else:
            self.logger = self._setup_logging(log_level)
        self.errors: List[Dict[str, Any]] = []

    def _setup_logging(self, level: str) -> logging.Logger:
        """Configure structured logging."""
        logger = logging.getLogger("snipkeep")
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def handle_error(self, error: Exception, context: Dict[str, Any]) -> Dict[str, Any]:
        """Process and log error with context information."""
        error_info = {
            "type": type(error).__name__,
            "message": str(error),
            "context": context,
            "traceback": traceback.format_exc() if self.logger.getEffectiveLevel() <= logging.DEBUG else None
        }

        self.logger.error(
            "%s: %s | Context: %s", error_info["type"], error_info["message"], context
        )

        self.errors.append(error_info)

        return error_info

    def collect_record_error(self, error: Exception, source: str, record: int) -> Dict[str, Any]:
        """Collect an import stream error for one record."""
        context = {
            "source": source,
            "record": record,
            "operation": "import"
        }
        return self.handle_error(error, context)

    def collect_store_error(self, error: Exception, index: int, operation: str) -> Dict[str, Any]:
        """Collect a store read or write error for one snippet index."""
        context = {
            "index": index,
            "operation": operation
        }
        return self.handle_error(error, context)

    def get_error_summary(self) -> Dict[str, Any]:
        """Generate summary of all collected errors."""
        if not self.errors:
            return {"total_errors": 0, "error_types": {}, "failed_records": []}

        error_types: Dict[str, int] = {}
        failed_records = []

        for error in self.errors:
            error_type = error["type"]
            error_types[error_type] = error_types.get(error_type, 0) + 1

            context = error.get("context", {})
            if "record" in context:
                failed_records.append({
                    "record": f"{context.get('source', 'stream')}#{context['record']}",
                    "error": error["message"],
                    "operation": context.get("operation", "unknown")
                })
            elif "index" in context:
                failed_records.append({
                    "record": f"snippet #{context['index']}",
                    "error": error["message"],
                    "operation": context.get("operation", "unknown")
                })

        return {
            "total_errors": len(self.errors),
            "error_types": error_types,
            "failed_records": failed_records
        }

    def clear_errors(self):
        """Clear collected errors."""
        self.errors.clear()

    def format_error_report(self) -> str:
        """Format user-friendly error report."""
        summary = self.get_error_summary()

        if summary["total_errors"] == 0:
            return ""

        lines = [
            f"\n⚠️  Error Summary: {summary['total_errors']} errors occurred",
            ""
        ]

        if summary["error_types"]:
            lines.append("Error Types:")
            for error_type, count in summary["error_types"].items():
                lines.append(f"  • {error_type}: {count}")
            lines.append("")

        if summary["failed_records"]:
            lines.append("Failed Records:")
            for failure in summary["failed_records"][:5]:  # Show first 5
                lines.append(f"  • {failure['record']}: {failure['error']}")

            if len(summary["failed_records"]) > 5:
                lines.append(f"  ... and {len(summary['failed_records']) - 5} more")

        return "\n".join(lines)
