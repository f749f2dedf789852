class SourceMapError(ValueError):
    def __init__(self, msg: str, *, source_count: int = None) -> None:
        super().__init__(msg)
        self.source_count = source_count
