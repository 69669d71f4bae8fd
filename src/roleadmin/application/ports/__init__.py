"""Application ports - interfaces for external adapters."""

from roleadmin.application.ports.csv_writer import CsvWriter
from roleadmin.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "CsvWriter",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
