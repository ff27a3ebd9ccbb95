"""Tests for MockValidationClient."""

import pytest

from itemsync.providers.validation import (
    FieldOutcome,
    FieldUpdate,
    ItemUpdateRequest,
    MockValidationClient,
    MutationResult,
    ValidationRequestError,
)


@pytest.fixture
def client() -> MockValidationClient:
    return MockValidationClient(
        rows={"5": {"ID": "5", "Title": "x"}},
        rules={"Title": lambda value: None if value else "required"},
    )


class TestWireModels:
    """Tests for the wire aliases."""

    def test_field_update_serializes_with_aliases(self) -> None:
        update = FieldUpdate(field_name="Title", field_value="y")
        assert update.model_dump(by_alias=True) == {
            "FieldName": "Title",
            "FieldValue": "y",
            "HasException": False,
            "ErrorMessage": "",
        }

    def test_result_parses_wire_shape(self) -> None:
        result = MutationResult.model_validate({
            "listRow": {"ID": "5"},
            "listFormValues": [
                {"FieldName": "Title", "HasException": True, "ErrorMessage": "required"}
            ],
        })
        assert result.has_exception is True
        assert result.list_form_values[0].error_message == "required"


class TestValidateUpdate:
    """Tests for validate_update."""

    @pytest.mark.asyncio
    async def test_valid_update_applies_to_row(self, client: MockValidationClient) -> None:
        result = await client.validate_update(
            "/lists/tasks", "5", [FieldUpdate(field_name="Title", field_value="y")]
        )

        assert result.has_exception is False
        assert result.list_row["Title"] == "y"
        assert client.row("5")["Title"] == "y"

    @pytest.mark.asyncio
    async def test_invalid_update_leaves_row(self, client: MockValidationClient) -> None:
        result = await client.validate_update(
            "/lists/tasks", "5", [FieldUpdate(field_name="Title", field_value="")]
        )

        assert result.list_form_values[0].has_exception is True
        assert result.list_row["Title"] == "x"

    @pytest.mark.asyncio
    async def test_unknown_item_raises(self, client: MockValidationClient) -> None:
        with pytest.raises(ValidationRequestError):
            await client.validate_update("/lists/tasks", "404", [])

    @pytest.mark.asyncio
    async def test_queued_response_wins(self, client: MockValidationClient) -> None:
        queued = MutationResult(
            list_row={"ID": "5", "Title": "server"},
            list_form_values=[FieldOutcome(field_name="Title")],
        )
        client.queue_response(queued)

        result = await client.validate_update("/lists/tasks", "5", [])

        assert result is queued
        assert len(client.call_history) == 1


class TestValidateCreate:
    """Tests for validate_create."""

    @pytest.mark.asyncio
    async def test_create_reports_new_identity(self, client: MockValidationClient) -> None:
        result = await client.validate_create(
            "/lists/tasks", "addnewrow_1", [FieldUpdate(field_name="Title", field_value="new")]
        )

        identity = [o for o in result.list_form_values if o.field_name == "Id"]
        assert len(identity) == 1
        assert client.row(identity[0].field_value)["Title"] == "new"

    @pytest.mark.asyncio
    async def test_rejected_create_stores_nothing(self, client: MockValidationClient) -> None:
        result = await client.validate_create(
            "/lists/tasks", "addnewrow_1", [FieldUpdate(field_name="Title", field_value="")]
        )

        assert result.has_exception is True
        assert all(o.field_name != "Id" for o in result.list_form_values)


class TestValidateUpdateBatch:
    """Tests for validate_update_batch."""

    @pytest.mark.asyncio
    async def test_batch_returns_result_per_item(self, client: MockValidationClient) -> None:
        results = await client.validate_update_batch(
            "/lists/tasks",
            [
                ItemUpdateRequest(item_id="5", form_values=[FieldUpdate(field_name="Title", field_value="a")]),
                ItemUpdateRequest(item_id="6", form_values=[FieldUpdate(field_name="Title", field_value="")]),
            ],
        )

        assert [r.has_exception for r in results] == [False, True]
        assert results[0].list_row == {"ID": "5", "Title": "a"}
