from datetime import date, datetime

from backend.calendar_controller import CalendarController
from backend.calendar_grid import WEEK

from fakes import FakeGateway, make_item


def _controller(items=None, **kwargs):
    gateway = FakeGateway(items)
    controller = CalendarController(gateway, 'u1', pivot=date(2024, 3, 10), tz='UTC', **kwargs)
    return controller, gateway


def test_refresh_fetches_visible_month():
    controller, gateway = _controller([make_item(1, '2024-03-15')])
    assert controller.refresh() is True
    assert gateway.fetch_calls == [('u1', '2024-02-25T00:00:00.000Z', '2024-04-06T23:59:59.999Z', None)]
    assert [item.id for item in controller.state.items] == ['1']
    assert controller.state.is_loading is False


def test_fetch_failure_discards_items_and_can_retry():
    controller, gateway = _controller([make_item(1, '2024-03-15')])
    controller.refresh()
    controller.select_day(date(2024, 3, 15))

    gateway.fetch_error = 'Request failed: 500'
    assert controller.go_next() is False
    assert controller.state.items == []
    assert controller.state.selected_items == []
    assert controller.state.error == 'Request failed: 500'
    assert controller.notices[-1] == ('error', 'Failed to load calendar data')

    gateway.fetch_error = None
    assert controller.retry() is True
    assert controller.state.error is None
    assert len(controller.state.items) == 1


def test_status_filter_rederives_without_fetch():
    controller, gateway = _controller([
        make_item(1, '2024-03-15', status='todo'),
        make_item(2, '2024-03-15', status='done'),
    ])
    controller.refresh()
    controller.select_day(date(2024, 3, 15))
    assert [item.id for item in controller.state.selected_items] == ['1', '2']

    controller.set_status_filter('todo')
    assert len(gateway.fetch_calls) == 1
    assert [item.id for item in controller.state.selected_items] == ['1']
    assert [item.id for item in controller.state.day_buckets()[date(2024, 3, 15)]] == ['1']


def test_board_scope_change_fetches_once():
    controller, gateway = _controller([make_item(1, '2024-03-15')])
    controller.load_boards()
    controller.refresh()

    assert controller.set_board('b2') is True
    assert len(gateway.fetch_calls) == 2
    assert gateway.fetch_calls[-1][3] == 'b2'
    assert gateway.full_board_calls == ['b2']
    assert controller.state.board_view.title == 'Ops'

    assert controller.set_board('all') is True
    assert len(gateway.fetch_calls) == 3
    assert gateway.fetch_calls[-1][3] is None
    assert controller.state.board_view is None


def test_unknown_board_is_reported_without_fetch():
    controller, gateway = _controller()
    controller.load_boards()
    assert controller.set_board('missing') is False
    assert gateway.fetch_calls == []
    assert controller.notices[-1] == ('error', 'Board not found')


def test_initial_board_applied_after_discovery():
    controller, gateway = _controller(board_id='b1')
    controller.load_boards()
    assert controller.state.board_id == 'b1'
    assert controller.state.board_view.lists[0]['title'] == 'To Do'

    controller.refresh()
    assert gateway.fetch_calls[-1][3] == 'b1'


def test_board_discovery_failure_notifies():
    controller, gateway = _controller()
    gateway.boards_error = 'Request failed: 500'
    assert controller.load_boards() == []
    assert controller.notices[-1] == ('error', 'Failed to load boards')


def test_navigation_moves_pivot_and_refetches():
    controller, gateway = _controller()
    controller.go_next()
    assert controller.state.pivot == date(2024, 4, 10)
    assert gateway.fetch_calls[-1][1] == '2024-03-31T00:00:00.000Z'

    controller.go_previous()
    controller.go_previous()
    assert controller.state.pivot == date(2024, 2, 10)
    assert len(gateway.fetch_calls) == 3


def test_week_mode_fetches_single_week():
    controller, gateway = _controller()
    controller.set_view_mode(WEEK)
    assert gateway.fetch_calls[-1][1:3] == ('2024-03-10T00:00:00.000Z', '2024-03-16T23:59:59.999Z')
    assert len(controller.day_cells()) == 7

    controller.go_next()
    assert controller.state.pivot == date(2024, 3, 17)


def test_toggle_completion_updates_cache_and_panel():
    controller, gateway = _controller([make_item(1, '2024-03-15')])
    controller.refresh()
    controller.select_day(date(2024, 3, 15))

    assert controller.toggle_completion(controller.state.items[0]) is True
    assert gateway.toggle_calls == [('1', True)]
    assert controller.state.items[0].completed is True
    assert controller.state.selected_items[0].completed is True
    assert len(gateway.fetch_calls) == 1
    assert controller.state.toggling_ids == set()


def test_toggle_failure_leaves_state():
    controller, gateway = _controller([make_item(1, '2024-03-15')])
    controller.refresh()
    controller.select_day(date(2024, 3, 15))
    gateway.toggle_error = 'Request failed: 403'

    assert controller.toggle_completion(controller.state.items[0]) is False
    assert controller.state.items[0].completed is False
    assert controller.state.selected_items[0].completed is False
    assert controller.notices[-1] == ('error', 'Failed to update status')


def test_status_change_drops_item_from_filtered_panel():
    controller, gateway = _controller([make_item(1, '2024-03-15', status='todo')])
    controller.refresh()
    controller.set_status_filter('todo')
    controller.select_day(date(2024, 3, 15))

    assert controller.change_status(controller.state.items[0], 'done') is True
    assert controller.state.items[0].status == 'done'
    assert controller.state.selected_items == []


def test_card_detail_path_needs_board():
    controller, _ = _controller()
    assert controller.card_detail_path(make_item(7, '2024-03-15')) == '/dashboard/u1/boards/b1?cardId=7'
    assert controller.card_detail_path(make_item(8, '2024-03-15', board_id=None)) is None
    assert controller.notices[-1] == ('error', 'Could not locate the board for this card')


def test_stale_fetch_response_is_discarded():
    controller, gateway = _controller([make_item('old', '2024-03-15')])

    def navigate_mid_flight():
        gateway.items = [make_item('new', '2024-04-15')]
        controller.go_next()
        gateway.items = [make_item('stale', '2024-03-15')]

    gateway.on_fetch = navigate_mid_flight
    assert controller.refresh() is False
    assert controller.state.pivot == date(2024, 4, 10)
    assert [item.id for item in controller.state.items] == ['new']


def test_day_cells_summarize_overflow():
    items = [make_item(i, '2024-03-15T09:00:00.000Z') for i in range(6)]
    controller, _ = _controller(items)
    controller.refresh()
    cells = {cell.day: cell for cell in controller.day_cells()}

    busy = cells[date(2024, 3, 15)]
    assert len(busy.items) == 4
    assert busy.overflow == 2
    assert cells[date(2024, 2, 25)].in_month is False
    assert len(controller.select_day(date(2024, 3, 15))) == 6


def test_status_filter_all_clears_and_unknown_is_reported():
    controller, gateway = _controller([
        make_item(1, '2024-03-15', status='todo'),
        make_item(2, '2024-03-15', status='done'),
    ])
    controller.refresh()
    controller.select_day(date(2024, 3, 15))
    controller.set_status_filter('done')

    assert controller.set_status_filter('all') is True
    assert controller.state.status_filter is None
    assert [item.id for item in controller.state.selected_items] == ['1', '2']

    assert controller.set_status_filter('someday') is False
    assert controller.state.status_filter is None
    assert controller.notices[-1] == ('error', 'Unknown status filter: someday')
    assert len(gateway.fetch_calls) == 1


def test_select_day_accepts_datetime():
    controller, _ = _controller([make_item(1, '2024-03-15')])
    controller.refresh()
    assert [item.id for item in controller.select_day(datetime(2024, 3, 15, 17, 45))] == ['1']
    assert controller.state.selected_day == date(2024, 3, 15)

    selected = [cell.day for cell in controller.day_cells() if cell.is_selected]
    assert selected == [date(2024, 3, 15)]
