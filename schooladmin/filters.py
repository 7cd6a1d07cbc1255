from .entities import full_name


def _contains(needle, *haystacks):
    needle = (needle or "").strip().lower()
    if not needle:
        return True
    return any(needle in (h or "").lower() for h in haystacks)

def filter_instructors(items, text=""):
    return [i for i in items
            if _contains(text, full_name(i), i.get("department"), i.get("email"))]

def filter_courses(items, text=""):
    return [c for c in items
            if _contains(text, c.get("courseName"), full_name(c.get("instructor")))]

def filter_students(items, text="", major=""):
    major = (major or "").strip()
    out = []
    for s in items:
        if not _contains(text, full_name(s), s.get("email")):
            continue
        if major and s.get("major") != major:
            continue
        out.append(s)
    return out

def distinct_majors(items):
    seen = []
    for s in items:
        m = s.get("major")
        if m and m not in seen:
            seen.append(m)
    return seen
