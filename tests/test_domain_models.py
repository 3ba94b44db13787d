"""Unit tests for domain models."""

from datetime import datetime, timezone

from resolver.domain.models import (
    CandidateRecord,
    CandidateSet,
    CanonicalRecord,
    EntityKind,
    FundingRound,
    Headquarters,
    WebSearchResponse,
)


class TestCandidateRecord:
    """Test suite for CandidateRecord."""

    def test_parses_camel_case_wire_format(self):
        candidate = CandidateRecord.model_validate(
            {
                "name": "Naukri.com",
                "websiteUrl": "https://naukri.com",
                "domain": "naukri.com",
                "employeeCount": "1000-5000",
                "fundingTotalUSD": 1500000,
                "lastFunding": {"round": "Series B", "amountUSD": "$500,000", "date": "01-02-2003"},
                "isPublic": True,
                "linkedinUrl": "https://linkedin.com/company/naukri",
            }
        )

        assert candidate.website_url == "https://naukri.com"
        assert candidate.employee_count == "1000-5000"
        assert candidate.funding_total_usd == 1500000.0
        assert candidate.last_funding == FundingRound(round="Series B", amount_usd=500000.0, date="01-02-2003")
        assert candidate.is_public is True
        assert candidate.has_identity is True

    def test_accepts_snake_case_field_names(self):
        candidate = CandidateRecord(name="Acme", website_url="https://acme.io", domain="acme.io")
        assert candidate.website_url == "https://acme.io"

    def test_placeholders_become_none(self):
        candidate = CandidateRecord.model_validate(
            {
                "name": "Acme",
                "description": "unknown",
                "fundingTotalUSD": "N/A",
                "isPublic": "unknown",
                "ticker": "-",
            }
        )

        assert candidate.description is None
        assert candidate.funding_total_usd is None
        assert candidate.is_public is None
        assert candidate.ticker is None

    def test_garbage_structured_fields_are_dropped(self):
        candidate = CandidateRecord.model_validate(
            {
                "name": "Acme",
                "industries": "Software",
                "founders": ["Jane Doe", {"name": "John Roe", "role": "CTO"}, {"role": "no name"}, 7],
                "leadership": "CEO is someone",
                "lastFunding": "Series A",
                "sources": ["https://crunchbase.com/acme", "", None, 3],
            }
        )

        assert candidate.industries == ["Software"]
        assert [f.name for f in candidate.founders] == ["Jane Doe", "John Roe"]
        assert candidate.founders[1].role == "CTO"
        assert candidate.leadership == []
        assert candidate.last_funding is None
        assert candidate.sources == ["https://crunchbase.com/acme"]

    def test_string_hq_split_into_city_and_country(self):
        candidate = CandidateRecord.model_validate({"name": "Acme", "hq": "Bengaluru, Karnataka, India"})
        assert candidate.hq == Headquarters(city="Bengaluru, Karnataka", country="India")

        only_city = CandidateRecord.model_validate({"name": "Acme", "hq": "London"})
        assert only_city.hq == Headquarters(city="London")

    def test_confidence_normalized_to_unit_interval(self):
        assert CandidateRecord(name="A", confidence=0.8).confidence == 0.8
        assert CandidateRecord(name="A", confidence=85).confidence == 0.85
        assert CandidateRecord(name="A", confidence="0.9").confidence == 0.9
        assert CandidateRecord(name="A", confidence=-1).confidence == 0.0
        assert CandidateRecord(name="A", confidence=500).confidence == 1.0
        assert CandidateRecord(name="A", confidence="high").confidence is None

    def test_has_identity_requires_all_three_fields(self):
        assert not CandidateRecord(name="Acme", website_url="https://acme.io").has_identity
        assert not CandidateRecord(website_url="https://acme.io", domain="acme.io").has_identity
        assert not CandidateRecord(name="Acme", domain="acme.io", website_url="unknown").has_identity

    def test_to_payload_uses_aliases_and_skips_empty_fields(self):
        candidate = CandidateRecord(
            name="Acme",
            website_url="https://acme.io",
            domain="acme.io",
            funding_total_usd=10.0,
        )

        payload = candidate.to_payload()

        assert payload["websiteUrl"] == "https://acme.io"
        assert payload["fundingTotalUSD"] == 10.0
        assert "description" not in payload
        assert payload["industries"] == []


class TestCandidateSet:
    def test_len_and_is_empty(self):
        assert CandidateSet().is_empty
        assert len(CandidateSet()) == 0

        candidate_set = CandidateSet(companies=[CandidateRecord(name="A"), CandidateRecord(name="B")])
        assert len(candidate_set) == 2
        assert not candidate_set.is_empty


class TestCanonicalRecord:
    def test_defaults(self):
        record = CanonicalRecord(id="abc", website_url="https://acme.io", name="Acme")

        assert record.kind == EntityKind.COMPANY
        assert record.sources == []
        assert record.logo_url is None

    def test_null_sources_from_storage_become_empty_list(self):
        record = CanonicalRecord(id="abc", website_url="https://acme.io", name="Acme", sources=None)
        assert record.sources == []

    def test_to_payload_serializes_timestamps(self):
        created = datetime(2025, 1, 1, tzinfo=timezone.utc)
        record = CanonicalRecord(
            id="abc",
            kind=EntityKind.PLATFORM,
            website_url="https://acme.io",
            name="Acme",
            created_at=created,
        )

        payload = record.to_payload()

        assert payload["kind"] == "platform"
        assert payload["createdAt"].startswith("2025-01-01T00:00:00")
        assert payload["websiteUrl"] == "https://acme.io"


class TestWebSearchResponse:
    def test_defaults(self):
        response = WebSearchResponse(query="acme")
        assert response.results == []
        assert response.has_results is False
