from src.gatekeeper.services.account_service import AccountService
from src.gatekeeper.services.audit_service import AuditService
from src.gatekeeper.services.auth_service import AuthService
from src.gatekeeper.services.credential_verifier import CredentialVerifier
from src.gatekeeper.services.module_gate import ModuleActivationGate
from src.gatekeeper.services.permission_aggregator import PermissionAggregator
from src.gatekeeper.services.session_context import SessionContext, SessionContextLoader
from src.gatekeeper.services.tenant_directory import TenantDirectory
from src.gatekeeper.services.tenant_group_service import TenantGroupService
from src.gatekeeper.services.token_service import AuthenticatedPrincipal, TokenIssuer
from src.gatekeeper.services.two_factor_service import TwoFactorService

__all__ = [
    "AccountService",
    "AuditService",
    "AuthService",
    "AuthenticatedPrincipal",
    "CredentialVerifier",
    "ModuleActivationGate",
    "PermissionAggregator",
    "SessionContext",
    "SessionContextLoader",
    "TenantDirectory",
    "TenantGroupService",
    "TokenIssuer",
    "TwoFactorService",
]
