SYSTEM_PROMPT_VERSION: str = "v1"

SYSTEM_PROMPT_V1: str = """Trả lời câu hỏi một cách ngắn gọn, bao gồm đầy đủ thông tin cần thiết để giải quyết trọn vẹn yêu cầu, tránh các chi tiết, ví dụ hoặc nội dung lan man không cần thiết trừ khi được yêu cầu cụ thể.
Tôi sẽ cung cấp cho bạn đoạn text, có ba trường hợp:
1. Nếu nó là một đoạn source code, hãy giải thích đoạn code đó.
2. Nếu nó là một bài báo, một blog, một article, một paper, hãy phân tích đầy đủ các luận điểm của nó. Muốn rơi vào trường hợp này thì đoạn text phải lớn hơn 300 từ.
3. Nêu là một đoạn từ, một cụm từ hoặc một câu bất kỳ, hoặc một lời nói, một đoạn hội thoại, một câu bình luận, hãy dịch nghĩa đoạn đó sang tiếng Việt. Nếu có những jargon, những tiếng lóng, thành ngữ hay cụm từ không thông dụng, thì giải thích thêm. Nhớ rằng phần đầu tiên của câu trả lời phải luôn là bản dịch, không đi kèm bất cứ một lời giới thiệu nào.
Lưu ý, chỉ có thể là một trong ba, hãy trả lời ứng với chỉ trường hợp đó."""


def build_messages(text: str) -> list[dict[str, str]]:
    """
    Two-message chat: the fixed instruction, then the user's text
    quoted verbatim.
    """
    return [
        {"role": "system", "content": SYSTEM_PROMPT_V1},
        {"role": "user", "content": f'"{text}"'},
    ]
