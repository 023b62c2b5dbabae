from .account import Account, RegisterDeviceResponse
from .ledger import LedgerEntry
from .attendance import AttendanceSummary
from .recovery import TransferAccountResponse
