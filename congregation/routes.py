from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from congregation.core.route_guard import GuardDecision, check_route
from congregation.schemas.auth import Role, SessionSnapshot


@dataclass(frozen=True)
class Route:
    path: str
    title: str
    icon: str
    page: str
    requires_session: bool = False
    roles: FrozenSet[Role] = frozenset()
    url: Optional[str] = None

    @property
    def url_path(self) -> str:
        # Streamlit wants url paths without the leading slash
        return self.url or self.path.strip("/")


HOME = Route("/", "Home", "🏠", "app_pages/1_Home.py")
AUTH = Route("/auth", "Sign In", "🔐", "app_pages/2_Auth.py")
CONTRIBUTE = Route("/contribute", "Make a Contribution", "💝", "app_pages/3_Contribute.py", requires_session=True)
HISTORY = Route("/history", "History", "📜", "app_pages/4_History.py", requires_session=True)
PROFILE = Route("/profile", "Profile", "👤", "app_pages/5_Profile.py", requires_session=True)
ADMIN = Route("/admin", "Admin Dashboard", "📊", "app_pages/6_Admin.py", roles=frozenset({Role.ADMIN}))
NOT_FOUND = Route("*", "Page Not Found", "❓", "app_pages/7_Not_Found.py", url="not-found")

ROUTES: List[Route] = [HOME, AUTH, CONTRIBUTE, HISTORY, PROFILE, ADMIN]


def find_route(path: str) -> Route:
    """Exact match on the normalised path; everything else is NOT_FOUND."""
    normalised = "/" + (path or "").strip().strip("/")
    for route in ROUTES:
        if route.path == normalised:
            return route
    return NOT_FOUND


def visible_routes(snapshot: SessionSnapshot) -> List[Route]:
    """Sidebar links for this snapshot: the sign-in page only while signed out."""
    routes = []
    for route in ROUTES:
        if route is AUTH:
            if not snapshot.is_authenticated:
                routes.append(route)
            continue
        if check_route(route, snapshot).decision is GuardDecision.ALLOW:
            routes.append(route)
    return routes
