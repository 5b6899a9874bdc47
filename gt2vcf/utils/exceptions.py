class Gt2VcfError(Exception):
    """Base class for errors that abort a conversion."""

class InputError(Gt2VcfError):
    pass

class ParseError(Gt2VcfError):
    def __init__(self, path, line, column, value, reason="invalid value"):
        self.path = path
        self.line = line
        self.column = column
        self.value = value
        super().__init__(f"{path}: line {line}, column {column}: {reason} '{value}'")

class ReferenceCatalogError(Gt2VcfError):
    pass

class UnmatchedAlleleError(Gt2VcfError):
    def __init__(self, marker_id, allele, alleles):
        self.marker_id = marker_id
        self.allele = allele
        self.alleles = alleles
        super().__init__(
            f"allele '{allele}' called at {marker_id} is not one of the reference alleles {','.join(alleles)}"
        )

class OutputError(Gt2VcfError):
    pass

class UploadError(Gt2VcfError):
    pass
