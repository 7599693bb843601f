from collections import defaultdict
from datetime import date
from uuid import UUID

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import ValidationError

from mp_core.common import events
from mp_core.common.api.params import date_or_none, flag, int_param, uuid_or_none
from mp_core.common.validators import cep_validator, digits_only, validate_cpf, validate_phone


def test_flag_is_tri_state():
    assert flag(None) is None
    assert flag("") is None
    assert flag("true") is True
    assert flag("1") is True
    assert flag("false") is False
    assert flag("0") is False


def test_int_param_clamps_and_defaults():
    assert int_param(None, "limit", default=10) == 10
    assert int_param("0", "limit", default=10) == 1
    assert int_param("9999", "limit", default=10, hi=50) == 50
    with pytest.raises(ValidationError):
        int_param("ten", "limit", default=10)


def test_uuid_and_date_params():
    assert uuid_or_none("", "patient_id") is None
    assert uuid_or_none("11111111-1111-1111-1111-111111111111", "patient_id") == UUID("11111111-1111-1111-1111-111111111111")
    assert date_or_none("2026-02-28", "date") == date(2026, 2, 28)

    with pytest.raises(ValidationError) as exc:
        uuid_or_none("nope", "patient_id")
    assert "patient_id" in exc.value.detail

    with pytest.raises(ValidationError):
        date_or_none("2026-02-30", "date")


def test_phone_and_cpf_validators():
    assert digits_only("(11) 98765-4321") == "11987654321"
    validate_phone("(11) 3456-7890")
    validate_phone("")
    validate_cpf("123.456.789-09")

    with pytest.raises(DjangoValidationError):
        validate_phone("12345")
    with pytest.raises(DjangoValidationError):
        validate_cpf("123.456")


def test_cep_validator():
    cep_validator("01310-100")
    cep_validator("01310100")
    with pytest.raises(DjangoValidationError):
        cep_validator("0131-0100")


def test_publish_calls_subscribers_once(monkeypatch):
    monkeypatch.setattr(events, "_registry", defaultdict(list))
    seen = []

    def handler(payload):
        seen.append(payload["id"])

    events.subscribe("thing.created")(handler)
    events.subscribe("thing.created")(handler)

    assert events.publish("thing.created", {"id": "a"}) == 1
    assert events.publish("other.event", {"id": "b"}) == 0

    assert seen == ["a"]


def test_reloaded_handler_replaces_previous(monkeypatch):
    monkeypatch.setattr(events, "_registry", defaultdict(list))
    seen = []

    def make_handler(tag):
        def handler(payload):
            seen.append(tag)

        return handler

    # same module and qualname, different function objects, as after a reload
    events.subscribe("thing.created")(make_handler("old"))
    events.subscribe("thing.created")(make_handler("new"))

    assert events.publish("thing.created", {"id": "a"}) == 1
    assert seen == ["new"]
