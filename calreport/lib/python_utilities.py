def to_normal_str(text):
    """
    Make sure we return a str, decoding bytes as utf-8 and
    normalizing line endings.
    """
    if text is None:
        return text
    if not isinstance(text, str):
        text = text.decode("utf-8")
    text = text.replace("\r\n", "\n")
    return text


def to_unicode(text):
    if text and isinstance(text, bytes):
        return text.decode("utf-8")
    return text
