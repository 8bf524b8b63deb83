"""
Centralized Korean UI messages.
All user-facing text in Korean for consistency.
"""

MESSAGES = {
    # Success messages
    'reservation_created': '예약이 접수되었습니다. {deadline}까지 입금해주세요.',
    'reservation_confirmed': '예약이 확정되었습니다',
    'reservation_cancelled': '예약이 취소되었습니다',
    'reservation_completed': '이용 완료 처리되었습니다',
    'reservation_no_show': '노쇼 처리되었습니다',
    'cancel_requested': '취소 요청이 완료되었습니다. 환불 예정액: {amount:,}원 ({rate}%)',
    'refund_completed': '환불 완료 처리되었습니다',
    'waitlist_registered': '빈자리가 나면 알려드릴게요!',
    'waitlist_already_registered': '이미 빈자리 알림을 신청하셨어요.',
    'waitlist_removed': '빈자리 알림이 취소되었습니다.',
    'pricing_updated': '가격 정책이 저장되었습니다. 즉시 반영됩니다.',
    'open_day_created': '예약 오픈일이 설정되었습니다.',
    'open_day_monthly_created': '자동 오픈 규칙이 설정되었습니다.',
    'blocked_date_created': '예약 차단일이 등록되었습니다',
    'blocked_date_deleted': '예약 차단이 해제되었습니다',
    'holiday_saved': '공휴일이 저장되었습니다',
    'holiday_deleted': '공휴일이 삭제되었습니다',
    'package_saved': '패키지 할인이 저장되었습니다',
    'package_deleted': '패키지 할인이 삭제되었습니다',
    'expired_pending': '입금 기한이 지난 예약 {count}건이 자동 취소되었습니다.',

    # Error messages
    'login_required': '로그인이 필요합니다.',
    'permission_denied': '권한이 없습니다',
    'data_required': '요청 데이터가 필요합니다',
    'reservation_not_found': '예약을 찾을 수 없습니다',
    'site_not_found': '사이트를 찾을 수 없습니다',
    'site_inactive': '현재 예약할 수 없는 사이트입니다',
    'date_required': '날짜를 선택해주세요',
    'invalid_date': '날짜 형식이 올바르지 않습니다 (YYYY-MM-DD)',
    'invalid_date_range': '퇴실일은 입실일보다 이후여야 합니다',
    'check_in_past': '지난 날짜는 예약할 수 없습니다',
    'stay_too_long': '최대 {max}박까지 예약할 수 있습니다',
    'family_count_invalid': '가족 수는 1 이상이어야 합니다',
    'visitor_count_invalid': '방문객 수는 0 이상이어야 합니다',
    'vehicle_count_invalid': '차량 수는 0 이상이어야 합니다',
    'occupancy_exceeded': '최대 {max}가족까지 이용할 수 있습니다',
    'guest_name_required': '예약자 이름을 입력해주세요',
    'guest_phone_invalid': '연락처 형식이 올바르지 않습니다',
    'price_changed': '요금이 변경되었습니다. 다시 확인해주세요 (현재 {price:,}원)',
    'pre_open': '예약 오픈 예정입니다. {open_at}부터 예약할 수 있습니다.',
    'season_closed': '금번 시즌 예약이 종료되었습니다. 다음 시즌을 기대해주세요!',
    'beyond_season': '예약 가능 기간({close_date})을 벗어난 날짜입니다',
    'weekend_min_stay': '금요일 입실은 2박 이상 예약해야 합니다',
    'already_booked': '이미 예약된 날짜입니다. 다른 날짜나 사이트를 선택해주세요',
    'concurrent_request': '다른 예약이 처리 중입니다. 잠시 후 다시 시도해주세요',
    'date_blocked': '예약이 차단된 날짜가 포함되어 있습니다',
    'refund_bank_required': '환불받을 은행, 계좌번호, 예금주를 모두 입력해주세요',
    'invalid_transition': '{current} 상태에서는 {target}(으)로 변경할 수 없습니다',
    'not_owner': '본인의 예약만 조회/취소할 수 있습니다',
    'waitlist_date_past': '지난 날짜에는 알림을 신청할 수 없습니다',
    'open_day_range_required': '오픈일과 종료일을 모두 지정해주세요.',
    'open_day_invalid_range': '종료일은 오픈일보다 이후여야 합니다.',
    'open_day_invalid_automation': '자동 오픈 설정이 올바르지 않습니다',
    'invalid_amount': '{field} 값이 올바르지 않습니다',
    'invalid_season': '성수기 기간 설정이 올바르지 않습니다',
    'not_found': '요청한 항목을 찾을 수 없습니다',
    'unknown_action': '알 수 없는 작업입니다: {action}',
    'server_error': '서버 오류가 발생했습니다',

    # Reservation statuses
    'status_PENDING': '입금 대기',
    'status_CONFIRMED': '예약 확정',
    'status_COMPLETED': '이용 완료',
    'status_CANCELLED': '취소',
    'status_REFUND_PENDING': '환불 대기',
    'status_REFUNDED': '환불 완료',
    'status_NO_SHOW': '노쇼',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
