"""
Configuration settings for the LEX engine

Loads environment variables and provides default engine/market configuration.
"""
import os
from dotenv import load_dotenv

from .constants import Q96

# Load environment variables from .env file
load_dotenv()

SECONDS_PER_YEAR: int = 365 * 24 * 3600


class Settings:
    """Engine settings"""

    # Curve edges and soft limits (human-readable price = sqrt_price^2)
    EDGE_LOW_PRICE: float = float(os.getenv("LEX_EDGE_LOW_PRICE", "0.25"))
    EDGE_HIGH_PRICE: float = float(os.getenv("LEX_EDGE_HIGH_PRICE", "4.0"))
    LIM_HIGH_PRICE: float = float(os.getenv("LEX_LIM_HIGH_PRICE", "3.0"))
    LIM_MAX_PRICE: float = float(os.getenv("LEX_LIM_MAX_PRICE", "3.6"))

    # Market defaults
    BASE_TOKEN: str = os.getenv("LEX_BASE_TOKEN", "WETH")
    BASE_DECIMALS: int = int(os.getenv("LEX_BASE_DECIMALS", 18))
    SWAP_FEE: int = int(os.getenv("LEX_SWAP_FEE", 3000))
    DEBT_DURATION: int = int(os.getenv("LEX_DEBT_DURATION", 30 * 24 * 3600))
    RATE_BIAS_ANNUAL: float = float(os.getenv("LEX_RATE_BIAS_ANNUAL", "0.0"))

    # Oracle
    ORACLE_MAX_AGE: int = int(os.getenv("LEX_ORACLE_MAX_AGE", 3600))

    def rate_bias_x96(self) -> int:
        """Annual continuously-compounded bias -> per-second Q96"""
        return int(self.RATE_BIAS_ANNUAL * Q96) // SECONDS_PER_YEAR


# Create global settings instance
settings = Settings()
