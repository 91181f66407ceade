from .common import (
    exit_with_message,
    read_input_text,
    render_diagnostics,
    resolve_output_path,
    write_json_outputs,
    write_output_text,
)

__all__ = [
    "exit_with_message",
    "read_input_text",
    "render_diagnostics",
    "resolve_output_path",
    "write_json_outputs",
    "write_output_text",
]
