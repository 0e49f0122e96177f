# Import all the models, so that Base has them before being
# imported by Alembic
from employee_portal.db.base_class import Base  # noqa

from employee_portal.models.user import User  # noqa
from employee_portal.models.access_token import AccessToken  # noqa
from employee_portal.models.employee import Employee  # noqa
