from .config import ClientConfig as ClientConfig
from .influx_client import InfluxClient as InfluxClient
