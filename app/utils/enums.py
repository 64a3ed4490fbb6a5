import enum


class Role(str, enum.Enum):
    admin = "admin"
    student = "student"


class RoundType(str, enum.Enum):
    individual = "individual"
    group = "group"
    mix = "mix"


class RoundStatus(str, enum.Enum):
    pending = "pending"
    active = "active"
    ended = "ended"


class QuestionType(str, enum.Enum):
    multiple_choice = "multiple_choice"
    multi_select = "multi_select"


class BulkOperationType(str, enum.Enum):
    import_users = "import_users"
    export_users = "export_users"


class BulkOperationStatus(str, enum.Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"


class LeaderboardType(str, enum.Enum):
    individual = "individual"
    team = "team"
    both = "both"


class ExportFormat(str, enum.Enum):
    json = "json"
    csv = "csv"
