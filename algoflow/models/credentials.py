# algoflow/models/credentials.py
"""
Broker credentials supplied by the caller.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BrokerCredentials(BaseModel):
    """
    Opaque per-broker credentials.

    Dhan uses access_token + client_id, Fyers access_token + app_id and
    Angel One access_token + api_key. Only presence is checked here.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_token: Optional[str] = Field(None, description="Broker access token")
    client_id: Optional[str] = Field(None, description="Broker client ID")
    app_id: Optional[str] = Field(None, description="Application ID (Fyers)")
    api_key: Optional[str] = Field(None, description="API key (Angel One)")

    def __repr__(self) -> str:
        present = [name for name, value in self.model_dump().items() if value]
        return f"BrokerCredentials(present={present})"

    __str__ = __repr__
