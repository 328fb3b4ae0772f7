import queue
import pygame

from config import IS_PI, UI_FPS, InvalidConfiguration, TunerConfig
from audio import MicrophoneSource
from frames import DeviceUnavailable
from session import SessionState, TunerSession
from ui import UIRenderer


class App:

    def __init__(self, config: TunerConfig):
        self.config = config
        print(f"[App] Sample rate: {config.sample_rate} Hz, frame length: {config.frame_length}")

        pygame.init()
        self.size = (800, 480) if IS_PI else (900, 640)
        self.screen = pygame.display.set_mode(self.size)
        pygame.display.set_caption("Harmonic Tuner")

        self.errors = queue.Queue()
        self.session = TunerSession(config, on_error=self.errors.put_nowait)
        self.renderer = UIRenderer(self.screen, self.size)
        self.clock = pygame.time.Clock()
        self.running = False

        self.result = None
        self.status = None

    @property
    def capturing(self) -> bool:
        return self.session.state is SessionState.CAPTURING

    def start_capture(self):
        source = MicrophoneSource(
            self.config.sample_rate, self.config.frame_length, device=self.config.input_device
        )
        try:
            self.session.start(source)
        except (InvalidConfiguration, DeviceUnavailable) as e:
            print(f"[App] Cannot start: {e}")
            self.status = str(e)
            return
        self.status = None
        self.result = None

    def stop_capture(self):
        self.session.stop()
        self.result = None

    def toggle_capture(self):
        if self.capturing:
            self.stop_capture()
        else:
            self.start_capture()

    def nudge_target(self, delta):
        try:
            self.session.target_hz = self.session.target_hz + delta
        except InvalidConfiguration as e:
            self.status = str(e)

    def drain_results(self):
        while True:
            try:
                self.result = self.session.results.get_nowait()
            except queue.Empty:
                break

        while True:
            try:
                err = self.errors.get_nowait()
            except queue.Empty:
                break
            self.status = f"Audio error: {err}"
            self.result = None

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                step = 0.1 if event.mod & pygame.KMOD_SHIFT else 1.0
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.toggle_capture()
                elif event.key == pygame.K_UP:
                    self.nudge_target(step)
                elif event.key == pygame.K_DOWN:
                    self.nudge_target(-step)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if self.renderer.exit_btn_rect and self.renderer.exit_btn_rect.collidepoint(event.pos):
                    self.running = False
                elif self.renderer.toggle_btn_rect and self.renderer.toggle_btn_rect.collidepoint(event.pos):
                    self.toggle_capture()

    def run(self):
        self.running = True
        print("[App] Entering main loop")

        try:
            while self.running:
                self.handle_events()
                self.drain_results()
                self.renderer.render(self.result, self.capturing, self.session.target_hz, self.status)
                self.clock.tick(UI_FPS)
        finally:
            self.session.stop()
            pygame.quit()
            print("[App] Application stopped")


def main():
    try:
        config = TunerConfig.from_env()
    except InvalidConfiguration as e:
        print(f"[App] Invalid configuration: {e}")
        raise SystemExit(2)
    App(config).run()


if __name__ == "__main__":
    main()
