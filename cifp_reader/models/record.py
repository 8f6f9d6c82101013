from dataclasses import dataclass
from typing import Any, ClassVar, Dict


@dataclass(frozen=True)
class RecordLine:
    """
    Fields shared by every CIFP record.

    ``header`` is the two character section code the record was read from;
    ``file_record_number`` and ``cycle`` come from the last nine columns of
    every line.
    """

    client: str
    file_record_number: int
    cycle: int

    header: ClassVar[str] = ''

    def _base_dict(self) -> Dict[str, Any]:
        return {
            'header': self.header,
            'client': self.client,
            'file_record_number': self.file_record_number,
            'cycle': self.cycle,
        }

    @classmethod
    def _base_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'client': data.get('client', '   '),
            'file_record_number': data.get('file_record_number', 0),
            'cycle': data.get('cycle', 0),
        }
