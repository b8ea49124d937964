"""PeerLearn API: peer mentorship courses, progression and learning communities."""
