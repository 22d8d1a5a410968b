"""
Отдельный проход удаления комментариев: '#' до конца строки вне
строковых литералов. Переводы строк сохраняются, поэтому номера строк
в сообщениях об ошибках остаются верными.
"""


def remove_comments(text: str) -> str:
    out = []
    in_string = False
    in_comment = False
    for ch in text:
        if in_comment:
            if ch == "\n":
                in_comment = False
                out.append(ch)
            continue
        if ch == '"':
            in_string = not in_string
        elif ch == "#" and not in_string:
            in_comment = True
            continue
        elif ch == "\n" and in_string:
            # незакрытая строка – дальше разберётся грамматика
            in_string = False
        out.append(ch)
    return "".join(out)
