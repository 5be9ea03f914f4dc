from leaselink.models.user import User
from leaselink.models.property import Property
from leaselink.models.unit import Unit
from leaselink.models.tenant import Tenant
from leaselink.models.ticket import Ticket
from leaselink.models.comment import Comment
