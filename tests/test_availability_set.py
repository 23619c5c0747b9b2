"""Tests for resource-group based services, via availability sets."""

import pytest

from azure_armrest import AvailabilitySetService
from azure_armrest.exceptions import ApiError, ApiErrorKind, ValidationError

PROVIDERS = {
    "value": [
        {
            "namespace": "Microsoft.Compute",
            "resourceTypes": [
                {
                    "resourceType": "availabilitySets",
                    "apiVersions": ["2016-04-30-preview", "2016-03-30"],
                    "locations": ["East US"],
                }
            ],
        }
    ]
}
GROUP_URL = (
    "https://management.azure.com/subscriptions/sub-1/resourceGroups/rg-1"
    "/providers/Microsoft.Compute/availabilitySets"
)


@pytest.fixture()
def arm(transport, seeded_token):
    transport.add("GET", "/providers?api-version=", PROVIDERS)
    return transport


@pytest.fixture()
def svc(config, arm) -> AvailabilitySetService:
    return AvailabilitySetService(config)


class TestAvailabilitySetService:
    def test_service_identity(self, svc) -> None:
        assert svc.service_name == "availabilitySets"
        assert svc.provider == "Microsoft.Compute"
        assert svc.api_version == "2016-03-30"

    def test_api_version_option(self, config, arm) -> None:
        svc = AvailabilitySetService(config, {"api_version": "2015-06-15"})
        assert svc.api_version == "2015-06-15"

    def test_list_uses_configured_group(self, svc, arm) -> None:
        arm.add("GET", "/availabilitySets?api-version=2016-03-30", {"value": [{"name": "as1"}]})

        assert svc.list() == [{"name": "as1"}]
        assert arm.calls[-1]["url"] == GROUP_URL + "?api-version=2016-03-30"

    def test_list_in_other_group(self, svc, arm) -> None:
        arm.add("GET", "/resourceGroups/rg-2/", {"value": []})
        assert svc.list("rg-2") == []

    def test_list_requires_group(self, config, arm) -> None:
        svc = AvailabilitySetService(config.model_copy(update={"resource_group": None}))
        with pytest.raises(ValidationError, match="resource_group must be specified"):
            svc.list()

    def test_list_all(self, svc, arm) -> None:
        arm.add(
            "GET",
            "/subscriptions/sub-1/providers/Microsoft.Compute/availabilitySets?",
            {"value": [{"name": "as1"}, {"name": "as2"}]},
        )
        assert [a["name"] for a in svc.list_all()] == ["as1", "as2"]

    def test_get(self, svc, arm) -> None:
        arm.add("GET", "/availabilitySets/as1?", {"name": "as1"})
        assert svc.get("as1")["name"] == "as1"
        assert arm.calls[-1]["url"] == GROUP_URL + "/as1?api-version=2016-03-30"

    def test_get_missing_is_not_found(self, svc, arm) -> None:
        arm.add(
            "GET",
            "/availabilitySets/nope?",
            text='{"error": {"code": "ResourceNotFound", "message": "not found"}}',
            status_code=404,
        )
        with pytest.raises(ApiError) as exc_info:
            svc.get("nope")
        assert exc_info.value.kind is ApiErrorKind.NOT_FOUND
        assert exc_info.value.code == "ResourceNotFound"

    def test_create(self, svc, arm) -> None:
        arm.add("PUT", "/availabilitySets/as1?", {"name": "as1", "location": "East US"})
        assert svc.create("as1", {"location": "East US"})["location"] == "East US"
        assert arm.calls[-1]["data"] == '{"location": "East US"}'

    def test_delete(self, svc, arm) -> None:
        arm.add("DELETE", "/availabilitySets/as1?", text="")
        svc.delete("as1")
        assert arm.count("DELETE", "/availabilitySets/as1?") == 1
