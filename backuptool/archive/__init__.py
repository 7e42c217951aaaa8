"""Archive layout, sessions, content storage and channel revision writing."""