from datetime import datetime, timezone

from sqlalchemy import event

from leadscore.models.lead import Company, Contact, Lead
from leadscore.models.lead_score import LeadScore


# Auto updated_at
@event.listens_for(Lead, "before_update")
@event.listens_for(Contact, "before_update")
@event.listens_for(Company, "before_update")
@event.listens_for(LeadScore, "before_update")
def update_timestamp(mapper, connection, target):
    target.updated_at = datetime.now(timezone.utc)
