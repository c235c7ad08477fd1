from benefitpoint.schemas.base import CamelModel


class BucketCounts(CamelModel):
    up_for_renewal: int = 0
    expired_no_action: int = 0
    new_business: int = 0


class DueCounts(CamelModel):
    due_today: int = 0
    past_due: int = 0
    upcoming: int = 0


class RequestCounts(CamelModel):
    due_today: int = 0
    past_due: int = 0
    responses: int = 0


class DashboardSummary(CamelModel):
    plans: BucketCounts
    products: BucketCounts
    record_assignments: DueCounts
    activities: DueCounts
    requests: RequestCounts
