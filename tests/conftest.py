from datetime import datetime

import boto3
import pytest
from moto import mock_aws

from etf_advisor.model_interface.types import InstrumentQuote, MarketContext
from etf_advisor.tools.market_data import TZ


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    # Fake credentials so boto3 never reaches a real account.
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
    monkeypatch.setenv("DDB_SESSION_TABLE", "advisor_sessions_test")
    monkeypatch.delenv("USE_XRAY", raising=False)
    monkeypatch.delenv("ALLOCATION_MODEL", raising=False)


@pytest.fixture
def make_market():
    def _make(outlook="positive", vix=None, sp_return=1.0, live=True, instruments=None, as_of=None):
        return MarketContext(
            outlook=outlook,
            volatility_index=vix,
            sp_return=sp_return,
            as_of=as_of or datetime.now(TZ).isoformat(timespec="seconds"),
            live=live,
            instruments=instruments or {},
        )
    return _make


@pytest.fixture
def offline_market(monkeypatch, make_market):
    """Pipeline gets a fixed live snapshot instead of calling Yahoo Finance."""
    ctx = make_market(vix=18.0, sp_return=0.8, instruments={
        "Satrix MSCI World ETF": InstrumentQuote(price=95.2, change_pct=0.4, volume=1200.0, three_month_return=5.1),
    })
    monkeypatch.setattr("etf_advisor.pipeline.get_market_context", lambda: ctx)
    return ctx


@pytest.fixture
def session_table():
    """Empty DynamoDB session table inside a moto mock."""
    with mock_aws():
        ddb = boto3.resource("dynamodb", region_name="eu-west-1")
        table = ddb.create_table(
            TableName="advisor_sessions_test",
            KeySchema=[{"AttributeName": "session_id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "session_id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield table
