"""Course domains, also used as learning-community categories."""

COURSE_DOMAINS: tuple[str, ...] = (
    "Python",
    "JavaScript",
    "React",
    "UI/UX Design",
    "Data Science",
    "Machine Learning",
    "Web Development",
    "Mobile Development",
    "DevOps",
    "Cybersecurity",
    "Resume Building",
    "Interview Prep",
)


def validate_domain(domain: str) -> str:
    """Return ``domain`` if it is in the catalog, else raise ValueError."""
    if domain not in COURSE_DOMAINS:
        msg = f"Unknown domain: {domain}"
        raise ValueError(msg)
    return domain
