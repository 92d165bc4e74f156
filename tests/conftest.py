"""Shared fixtures: pricing catalog, sample contract states and the API client."""

import pytest
from fastapi.testclient import TestClient

from snapcontract.domain.contracts.state import ContractState, CustomOption
from snapcontract.domain.pricing.catalog import load_catalog
from snapcontract.main import app

SIGNATURE_PNG = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


@pytest.fixture
def catalog():
    """Built-in pricing catalog."""
    return load_catalog()


@pytest.fixture
def full_state():
    """A contract that uses every field type (text, enum, bool, nested list, blob)."""
    return ContractState(
        contractorName="홍길동",
        venue="XX호텔 YY홀",
        contact="010-1234-5678",
        weddingDate="2025-05-17",
        weddingTime="14:30",
        packageConfig="standard",
        options="banquet",
        hasCustomOption=True,
        customOptions=[
            CustomOption(id=1, name="원본 추가 할인", price=10000, sign=-1),
            CustomOption(id=2, name="앨범 추가", price="30000", sign=1),
        ],
        discountItems=["partner"],
        finalPrice="280,000원",
        signature=SIGNATURE_PNG,
    )


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
