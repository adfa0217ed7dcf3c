# Re-export tool modules so `from etf_advisor import tools; tools.market_data...` works.
from . import market_analysis  # narrative + factors
from . import market_data  # yfinance quotes and conditions
from . import dynamodb_tool  # session table access
