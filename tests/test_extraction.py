"""
Tests for agent_demos/models.py and agent_demos/extraction.py
=============================================================
DSPy is never asked to call a model: dspy.Predict is patched to return a
canned prediction.

Covers:
  - record validation ranges and display formatting
  - has_any_data / extraction_confidence
  - StructuredExtractor: lazy predictor per schema, dict → record, unknown schema
  - ExtractionSession: schema switching and result formatting
"""
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from agent_demos.demos.structured_output import ExtractionSession
from agent_demos.extraction import ExtractCompany, ExtractPerson, StructuredExtractor, extraction_confidence
from agent_demos.models import NOT_SPECIFIED, SCHEMAS, CompanyInfo, PersonInfo, ProductInfo


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class TestModels:
    def test_person_display(self):
        person = PersonInfo(name="John", age=30, occupation="software engineer", city="Seattle")
        assert person.to_display_dict() == {
            "Name": "John", "Age": "30", "Occupation": "software engineer", "City": "Seattle",
        }

    def test_missing_fields_show_not_specified(self):
        company = CompanyInfo(name="Apple Inc.", founded_year=1976)
        display = company.to_display_dict()

        assert display["Founded"] == "1976"
        assert display["Industry"] == NOT_SPECIFIED
        assert display["Employees"] == NOT_SPECIFIED

    def test_price_is_formatted(self):
        assert ProductInfo(name="iPhone 15", price=999).to_display_dict()["Price"] == "$999.00"

    @pytest.mark.parametrize("model,field,value", [
        (PersonInfo, "age", 200),
        (PersonInfo, "age", -1),
        (CompanyInfo, "founded_year", 1700),
        (CompanyInfo, "employees", -5),
        (ProductInfo, "price", -0.01),
    ])
    def test_out_of_range_values_fail_validation(self, model, field, value):
        with pytest.raises(ValidationError):
            model(**{field: value})

    def test_has_any_data(self):
        assert PersonInfo().has_any_data() is False
        assert PersonInfo(name="   ").has_any_data() is False
        assert PersonInfo(city="Oslo").has_any_data() is True

    def test_every_schema_has_descriptions(self):
        for model in SCHEMAS.values():
            assert all(model.field_descriptions().values())

    def test_confidence(self):
        filled, total, percent = extraction_confidence(PersonInfo(name="John", age=30))
        assert (filled, total, percent) == (2, 4, 50.0)


# ---------------------------------------------------------------------------
# StructuredExtractor
# ---------------------------------------------------------------------------

class TestStructuredExtractor:
    def test_signatures_output_the_record_model(self):
        assert ExtractPerson.output_fields["record"].annotation is PersonInfo
        assert ExtractCompany.output_fields["record"].annotation is CompanyInfo

    def test_predictor_is_created_once_per_schema(self):
        with patch("agent_demos.extraction.dspy.Predict") as mock_predict:
            extractor = StructuredExtractor()
            first = extractor.predictor("person")
            second = extractor.predictor("person")
            extractor.predictor("company")

        assert first is second
        assert [c.args[0] for c in mock_predict.call_args_list] == [ExtractPerson, ExtractCompany]

    def test_extract_returns_record(self):
        record = PersonInfo(name="John", age=30)
        predictor = MagicMock(return_value=MagicMock(record=record))

        with patch("agent_demos.extraction.dspy.Predict", return_value=predictor):
            result = StructuredExtractor().extract("person", "John is 30")

        assert result is record
        predictor.assert_called_once_with(text="John is 30")

    def test_dict_record_is_validated(self):
        predictor = MagicMock(return_value=MagicMock(record={"name": "Apple Inc.", "founded_year": 1976}))

        with patch("agent_demos.extraction.dspy.Predict", return_value=predictor):
            result = StructuredExtractor().extract("company", "Apple was founded in 1976")

        assert isinstance(result, CompanyInfo)
        assert result.founded_year == 1976

    def test_unknown_schema(self):
        with pytest.raises(KeyError):
            StructuredExtractor().predictor("animal")


# ---------------------------------------------------------------------------
# ExtractionSession (demo 3)
# ---------------------------------------------------------------------------

class TestExtractionSession:
    def _session(self, record=None):
        extractor = MagicMock()
        extractor.extract.return_value = record
        output = []
        return ExtractionSession(extractor, output_fn=output.append), extractor, output

    def test_switch_schema(self):
        session, _, output = self._session()

        session.switch_schema("Company")

        assert session.schema == "company"
        assert session.prompt() == "\nYou (company): "
        assert "\n✅ Switched to 'company' schema" in output

    def test_unknown_schema_keeps_current(self):
        session, _, output = self._session()

        session.switch_schema("animal")

        assert session.schema == "person"
        assert "Available schemas: person, company, product" in output

    async def test_extract_formats_record(self):
        session, extractor, _ = self._session(PersonInfo(name="John", age=30, occupation="engineer", city="Seattle"))

        reply = await session.extract("John is 30")

        extractor.extract.assert_called_once_with("person", "John is 30")
        assert reply.startswith("📊 Extracted Person Information:")
        assert "   Name: John" in reply
        assert "100.0% (4/4 fields)" in reply

    async def test_empty_record_is_reported(self):
        session, _, _ = self._session(PersonInfo())

        reply = await session.extract("The sky is blue")

        assert reply.startswith("❌ Could not extract person information")
