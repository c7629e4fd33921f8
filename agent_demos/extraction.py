"""
Structured Extractor (DSPy)
===========================
Turns free text into one of the typed records in models.py.

Design principle: DSPy for typed sub-tasks, LangGraph for conversation.
The Structured Output demo has no tools and no history; each input is a
single extraction, so a DSPy Predict over a signature whose output field is
the Pydantic model is all it needs. DSPy handles the JSON schema and parses
the reply into the record.
"""
import logging

import dspy

from .models import NOT_SPECIFIED, CompanyInfo, PersonInfo, ProductInfo, SCHEMAS

logger = logging.getLogger(__name__)


class ExtractPerson(dspy.Signature):
    """
    Extract structured person information from the text.
    Only extract what is explicitly mentioned or can be reasonably inferred.
    Leave a field null when the text doesn't say.
    """
    text:   str        = dspy.InputField(desc="Free text that may describe a person")
    record: PersonInfo = dspy.OutputField(desc="Name, age, occupation and city of the person")


class ExtractCompany(dspy.Signature):
    """
    Extract structured company information from the text.
    Only extract what is explicitly mentioned or can be reasonably inferred.
    Leave a field null when the text doesn't say.
    """
    text:   str         = dspy.InputField(desc="Free text that may describe a company")
    record: CompanyInfo = dspy.OutputField(desc="Name, industry, founding year, location and headcount")


class ExtractProduct(dspy.Signature):
    """
    Extract structured product information from the text.
    Only extract what is explicitly mentioned or can be reasonably inferred.
    Leave a field null when the text doesn't say.
    """
    text:   str         = dspy.InputField(desc="Free text that may describe a product")
    record: ProductInfo = dspy.OutputField(desc="Name, category, price, brand and description")


SIGNATURES: dict[str, type[dspy.Signature]] = {
    "person":  ExtractPerson,
    "company": ExtractCompany,
    "product": ExtractProduct,
}


class StructuredExtractor(dspy.Module):
    """
    One Predict per schema, created on first use.

    Usage:
        extractor = StructuredExtractor()
        person = extractor.extract("person", "John is 30, an engineer in Seattle")
    """

    def __init__(self):
        super().__init__()
        self._predictors: dict[str, dspy.Predict] = {}

    def predictor(self, schema: str) -> dspy.Predict:
        if schema not in SIGNATURES:
            raise KeyError(f"Unknown schema '{schema}'. Available: {', '.join(SCHEMAS)}")
        if schema not in self._predictors:
            self._predictors[schema] = dspy.Predict(SIGNATURES[schema])
        return self._predictors[schema]

    def forward(self, schema: str, text: str):
        result = self.predictor(schema)(text=text)
        record = result.record
        if isinstance(record, dict):
            record = SCHEMAS[schema].model_validate(record)
        logger.info("[extraction] %s → %s", schema, record)
        return record

    def extract(self, schema: str, text: str):
        return self.forward(schema, text)


def extraction_confidence(record) -> tuple[int, int, float]:
    """(filled fields, total fields, percent filled) from the display dict."""
    display = record.to_display_dict()
    total = len(display)
    filled = sum(1 for value in display.values() if value != NOT_SPECIFIED)
    percent = filled / total * 100 if total else 0.0
    return filled, total, percent
