"""
End-to-end generation: read metadata, emit source, write the output file.
"""

import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .constants import DEFAULT_LANGUAGE
from .emitter import get_emitter
from .metadata_parser import MetadataParser
from .models import Model
from .policy import GenerationPolicy


class CodeGenerator:
    """Runs the parse -> resolve -> emit pipeline and writes the result.

    The whole output is built in memory first and only then written, via a
    temporary file in the target directory, so a failing run never leaves a
    partial file behind.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE, policy: Optional[GenerationPolicy] = None,
                 verbose: bool = False):
        self.language = language
        self.policy = policy or GenerationPolicy()
        self.verbose = verbose
        self.parser = MetadataParser(verbose=verbose)
        # Fails fast on an unknown language, before any input is read
        self.emitter = get_emitter(language, self.policy, verbose=verbose)

    def _log_verbose(self, message: str):
        """Prints message to stderr only if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
            print(f"[{timestamp} Generator VERBOSE] {message}", file=sys.stderr)

    @property
    def diagnostics(self) -> List[str]:
        return list(self.emitter.diagnostics)

    def load(self, input_path: Optional[Union[str, Path]] = None, service_url: Optional[str] = None,
             auth: Optional[Tuple[str, str]] = None) -> Model:
        if service_url:
            return self.parser.fetch(service_url, auth)
        if input_path is None:
            raise ValueError("Either an input path or a service URL is required")
        return self.parser.parse_file(input_path)

    def generate(self, model: Model) -> str:
        return self.emitter.emit(model)

    def generate_file(self, input_path: Union[str, Path]) -> str:
        return self.generate(self.parser.parse_file(input_path))

    def generate_service(self, service_url: str, auth: Optional[Tuple[str, str]] = None) -> str:
        return self.generate(self.parser.fetch(service_url, auth))

    def resolved_entities(self, model: Model) -> List[str]:
        return self.emitter.resolver.resolve_names(model.schema_)

    def write(self, text: str, output_path: Union[str, Path]) -> Path:
        """Atomically write the generated text, creating parent directories."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=output_path.parent, prefix=f".{output_path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
                f.write(text)
            os.replace(tmp_name, output_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        self._log_verbose(f"Wrote {len(text)} characters to {output_path}")
        return output_path

    def run(self, output_path: Union[str, Path], input_path: Optional[Union[str, Path]] = None,
            service_url: Optional[str] = None, auth: Optional[Tuple[str, str]] = None) -> Path:
        model = self.load(input_path, service_url, auth)
        text = self.generate(model)
        return self.write(text, output_path)
